from typing import Optional
from urllib.parse import quote_plus

from app.core.config import settings
from app.utils.validators import clean_isbn, is_valid_isbn

DEFAULT_AFFILIATE_TAG = "cosmicjs-20"


def build_purchase_link(isbn: str, affiliate_tag: Optional[str] = None) -> str:
    """
    Build an Amazon product link for an ISBN.

    Falls back to an Amazon search URL for the raw value when the ISBN does not
    look like an ISBN-10/13, so a bad ISBN from the model never breaks a card.
    """
    clean = clean_isbn(isbn)
    if not is_valid_isbn(clean):
        return f"https://www.amazon.com/s?k={quote_plus(isbn or '')}"

    tag = affiliate_tag or settings.AMAZON_AFFILIATE_TAG or DEFAULT_AFFILIATE_TAG
    return f"https://www.amazon.com/dp/{clean}?tag={quote_plus(tag)}"
