"""
Display URLs for entry images.

Spreadsheet cells usually hold Google Drive share links, which open a viewer
page rather than the image itself. They are rewritten to the Drive thumbnail
endpoint; any other URL is shown as entered.
"""

import re

DRIVE_HOST = "drive.google.com"
DRIVE_FILE_PATTERN = re.compile(r"/file/d/([a-zA-Z0-9_-]+)/view")
DRIVE_ID_PATTERN = re.compile(r"[?&]id=([a-zA-Z0-9_-]+)")
THUMBNAIL_URL = "https://drive.google.com/thumbnail?id={file_id}&sz=w800"


def image_url(url: str) -> str:
    """
    Return a directly displayable URL for ``url``.

    An ``id=`` query parameter takes precedence over a ``/file/d/<id>/view``
    path. URLs without a Drive file id, and empty values, pass through.
    """
    if DRIVE_HOST not in url:
        return url

    file_id = ""
    file_match = DRIVE_FILE_PATTERN.search(url)
    if file_match:
        file_id = file_match.group(1)
    id_match = DRIVE_ID_PATTERN.search(url)
    if id_match:
        file_id = id_match.group(1)

    if not file_id:
        return url
    return THUMBNAIL_URL.format(file_id=file_id)
