"""Tests for upload and ISBN validation helpers."""
from app.utils.validators import (
    MAX_IMAGE_SIZE_BYTES,
    is_non_empty_string,
    is_valid_isbn,
    validate_image_file,
)
from conftest import make_upload


def test_missing_file_is_rejected_first():
    result = validate_image_file(None)
    assert result.valid is False
    assert result.error == "No file provided"


def test_non_image_type_is_rejected():
    result = validate_image_file(make_upload(content_type="application/pdf", filename="shelf.pdf"))
    assert result.valid is False
    assert result.error == "File must be an image (JPEG, PNG, GIF, WebP)"


def test_type_is_checked_before_size():
    """An oversized non-image reports the type problem."""
    big_pdf = make_upload(data=b"0" * (MAX_IMAGE_SIZE_BYTES + 1), content_type="application/pdf")
    assert validate_image_file(big_pdf).error == "File must be an image (JPEG, PNG, GIF, WebP)"


def test_15mb_image_is_rejected():
    result = validate_image_file(make_upload(data=b"0" * (15 * 1024 * 1024)))
    assert result.valid is False
    assert result.error == "File size must be less than 10MB"


def test_image_at_exact_limit_is_accepted():
    result = validate_image_file(make_upload(data=b"0" * MAX_IMAGE_SIZE_BYTES, content_type="image/png"))
    assert result.valid is True
    assert result.error is None


def test_isbn13_with_known_prefix_is_valid():
    assert is_valid_isbn("9780525559474") is True
    assert is_valid_isbn("979-10-90636-07-1") is True


def test_isbn10_with_hyphens_is_valid():
    assert is_valid_isbn("0-13-468599-7") is True
    assert is_valid_isbn("080442957X") is True


def test_isbn_shape_only_no_checksum():
    """A checksum-invalid but well-shaped ISBN still passes."""
    assert is_valid_isbn("9781234567890") is True


def test_invalid_isbn_shapes():
    assert is_valid_isbn("123") is False
    assert is_valid_isbn("") is False
    assert is_valid_isbn(None) is False
    assert is_valid_isbn("9771234567890") is False  # wrong 13-digit prefix
    assert is_valid_isbn("X123456789") is False
    assert is_valid_isbn("not-an-isbn") is False


def test_non_empty_helpers():
    assert is_non_empty_string("  text ") is True
    assert is_non_empty_string("   ") is False
    assert is_non_empty_string(None) is False
