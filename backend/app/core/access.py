"""
Shared-secret gate for the gallery.

There are no user accounts: a single ACCESS_CODE from the environment is
compared against what the client submits.
"""
import hmac
from typing import Optional


class AccessCodeNotConfigured(RuntimeError):
    """Raised when the server has no ACCESS_CODE to compare against."""
    pass


def check_access_code(provided: str, expected: Optional[str]) -> bool:
    """Constant-time comparison of the submitted code with the configured one."""
    if not expected:
        raise AccessCodeNotConfigured("ACCESS_CODE environment variable is not set")
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
