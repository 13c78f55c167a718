import pytest

from placement_api.core.errors import ValidationError
from placement_api.utils.document_links import is_valid_drive_url, validate_document_links


@pytest.mark.parametrize("url", [
    "https://drive.google.com/file/d/1AbC_def-GH/view",
    "https://drive.google.com/file/d/1AbC_def-GH/view?usp=sharing",
    "https://drive.google.com/open?id=1AbC_def-GH",
    "https://docs.google.com/document/d/1AbC_def-GH/edit",
    "https://docs.google.com/document/d/1AbC_def-GH/edit?usp=sharing",
])
def test_accepted_drive_links(url):
    assert is_valid_drive_url(url)


@pytest.mark.parametrize("url", [
    "https://example.com/resume.pdf",
    "http://drive.google.com/file/d/1AbC/view",
    "https://drive.google.com/file/d/1AbC/edit",
    "https://drive.google.com/file/d/1A bC/view",
    "https://drive.google.com/open?id=",
    "https://drive.google.com/file/d/abc123/view\n",
    "",
    None,
])
def test_rejected_links(url):
    assert not is_valid_drive_url(url)


def test_blank_links_are_allowed():
    validate_document_links({"resumeUrl": "", "marksMemoUrl": "   "})


def test_other_fields_are_not_checked():
    validate_document_links({"linkedinUrl": "https://linkedin.com/in/ananya"})


def test_error_names_the_document():
    with pytest.raises(ValidationError) as exc_info:
        validate_document_links({"marksMemoUrl": "https://example.com/memo.pdf"})

    assert exc_info.value.status_code == 400
    assert "CMM" in exc_info.value.message
    assert "drive.google.com" in exc_info.value.message


def test_trailing_newline_link_is_rejected():
    with pytest.raises(ValidationError):
        validate_document_links({"resumeUrl": "https://drive.google.com/file/d/abc123/view\n"})
