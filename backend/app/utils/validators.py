"""Validation helpers for uploads and book identifiers."""
import re
from typing import Any, Optional

from app.schemas.media import UploadedFile, ValidationResult

MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB

_ISBN_SEPARATORS = re.compile(r"[-\s]")
_ISBN_10 = re.compile(r"^[0-9]{9}[0-9X]$")
_ISBN_13 = re.compile(r"^(978|979)[0-9]{10}$")


def validate_image_file(file: Optional[UploadedFile]) -> ValidationResult:
    """
    Check that an upload is present, is an image, and fits the size limit.

    Checks run in that order; only the first failure is reported.
    """
    if file is None:
        return ValidationResult(valid=False, error="No file provided")
    return check_image_constraints(file.content_type, file.size)


def check_image_constraints(content_type: Optional[str], size: Optional[int]) -> ValidationResult:
    """
    Type and size checks alone, so they can run on the declared multipart
    headers before the body is read. An unknown size passes.
    """
    if not (content_type or "").startswith("image/"):
        return ValidationResult(valid=False, error="File must be an image (JPEG, PNG, GIF, WebP)")

    if size is not None and size > MAX_IMAGE_SIZE_BYTES:
        return ValidationResult(valid=False, error="File size must be less than 10MB")

    return ValidationResult(valid=True)


def clean_isbn(isbn: str) -> str:
    """Remove hyphens and whitespace from an ISBN string."""
    return _ISBN_SEPARATORS.sub("", isbn or "")


def is_valid_isbn(isbn: Optional[str]) -> bool:
    """
    Format check for ISBN-10 (last char may be X) or 978/979 ISBN-13.

    Checksums are not verified.
    """
    if not isbn:
        return False
    clean = clean_isbn(isbn)
    return bool(_ISBN_10.match(clean) or _ISBN_13.match(clean))


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0
