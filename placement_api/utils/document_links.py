"""
Document Link Validation - resumes and marks memos live on Google Drive.

The platform never stores files; students paste a share link instead.
Accepted shapes (checked by pattern only, the link is never fetched):
- https://drive.google.com/file/d/<id>/view[?query]
- https://drive.google.com/open?id=<id>
- https://docs.google.com/document/d/<id>/<path>[?query]
"""

import re
from typing import Optional

from placement_api.core.errors import ValidationError


DRIVE_URL_PATTERNS = (
    re.compile(r"^https://drive\.google\.com/file/d/[a-zA-Z0-9_-]+/view(\?[^?]*)?$"),
    re.compile(r"^https://drive\.google\.com/open\?id=[a-zA-Z0-9_-]+$"),
    re.compile(r"^https://docs\.google\.com/document/d/[a-zA-Z0-9_-]+/[^?]*(\?[^?]*)?$"),
)

# Profile fields holding a drive link, with the label used in error messages
DOCUMENT_LINK_FIELDS = {
    "resumeUrl": "Resume",
    "marksMemoUrl": "CMM",
}


def is_valid_drive_url(url: Optional[str]) -> bool:
    """Check a link against the accepted Google Drive shapes."""
    if not url or not isinstance(url, str):
        return False
    return any(pattern.fullmatch(url) for pattern in DRIVE_URL_PATTERNS)


def validate_document_links(fields: dict) -> None:
    """
    Raise ValidationError for the first non-blank document link that is not
    a drive link. Blank values are allowed and clear the link.
    """
    for field, label in DOCUMENT_LINK_FIELDS.items():
        value = fields.get(field)
        if value is None or not value.strip():
            continue
        if not is_valid_drive_url(value):
            raise ValidationError(
                f"Please provide a valid Google Drive URL for {label} "
                "(e.g., https://drive.google.com/file/d/your-file-id/view)"
            )
