import pytest

from domain.validation import digits_only, validate_identifier, validate_month


class TestValidateIdentifier:
    @pytest.mark.unit
    def test_accepts_eight_digits(self) -> None:
        assert validate_identifier("12345678") is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            "1234567",
            "1234567a",
            "123456789",
            "",
            " 12345678",
            "1234 5678",
            "１２３４５６７８",
        ],
    )
    def test_rejects_anything_else(self, raw: str) -> None:
        assert validate_identifier(raw) is False

    @pytest.mark.unit
    def test_rejects_non_strings(self) -> None:
        assert validate_identifier(12345678) is False  # type: ignore[arg-type]


class TestDigitsOnly:
    @pytest.mark.unit
    def test_strips_and_truncates(self) -> None:
        assert digits_only("12-34 56ab789") == "12345678"

    @pytest.mark.unit
    def test_handles_empty_input(self) -> None:
        assert digits_only("") == ""


class TestValidateMonth:
    @pytest.mark.unit
    def test_month_names(self) -> None:
        assert validate_month("May") is True
        assert validate_month("october") is True

    @pytest.mark.unit
    def test_rejects_non_months(self) -> None:
        assert validate_month("") is False
        assert validate_month("05") is False
