import pytest

from domain.images import image_url


class TestImageUrl:
    """Test rewriting of Drive share links to thumbnail URLs."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url, expected",
        [
            (
                "https://drive.google.com/file/d/1AbC_d-9/view?usp=sharing",
                "https://drive.google.com/thumbnail?id=1AbC_d-9&sz=w800",
            ),
            (
                "https://drive.google.com/open?id=XyZ-42",
                "https://drive.google.com/thumbnail?id=XyZ-42&sz=w800",
            ),
            (
                "https://drive.google.com/uc?export=view&id=Q_1",
                "https://drive.google.com/thumbnail?id=Q_1&sz=w800",
            ),
        ],
    )
    def test_drive_links(self, url: str, expected: str) -> None:
        assert image_url(url) == expected

    @pytest.mark.unit
    def test_id_parameter_wins_over_file_path(self) -> None:
        url = "https://drive.google.com/file/d/fromPath/view?id=fromQuery"
        assert image_url(url) == "https://drive.google.com/thumbnail?id=fromQuery&sz=w800"

    @pytest.mark.unit
    def test_drive_link_without_file_id_is_unchanged(self) -> None:
        url = "https://drive.google.com/drive/folders"
        assert image_url(url) == url

    @pytest.mark.unit
    def test_other_hosts_are_unchanged(self) -> None:
        url = "https://img.example.com/1-before.jpg?id=123"
        assert image_url(url) == url

    @pytest.mark.unit
    def test_empty(self) -> None:
        assert image_url("") == ""
