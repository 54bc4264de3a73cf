from typing import Dict, List

import pytest


@pytest.fixture
def sheet_rows() -> List[Dict[str, str]]:
    """Six spreadsheet rows: five dated in May, one in June."""
    return [
        {
            "Control Number": "CN-001",
            "Record Number": "R-1",
            "Area Code": "A1",
            "Category": "Safety",
            "Entry Title": "Guard rail on press",
            "Description": "Operators reached over the die.",
            "Before Image": "https://img.example.com/1-before.jpg",
            "After Image": "https://img.example.com/1-after.jpg",
            "Improvement": "Installed a guard rail",
            "Improvement Effect": "No reach-in possible",
            "Date and Time": "2025-05-02T08:15:00.000Z",
        },
        {
            "Control Number": "CN-002",
            "Entry Title": "Label shelves",
            "Date and Time": "05-16-2025",
        },
        {
            "Control Number": "CN-003",
            "Entry Title": "Move bins closer",
            "Date and Time": "5/20/2025 14:03:00",
        },
        {
            "Control Number": "CN-004",
            "Entry Title": "Shadow board",
            "Date and Time": "Finished in May, week 3",
        },
        {
            "Control Number": "CN-005",
            "Entry Title": "Cable covers",
            "Date and Time": "June 3, 2025",
        },
        {
            "Control Number": "CN-006",
            "Entry Title": "Floor markings",
            "Date and Time": "May 28, 2025",
        },
    ]
