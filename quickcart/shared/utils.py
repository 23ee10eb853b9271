import logging
import math
import re
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from quickcart.config.constants import OBJECT_ID_PATTERN
from quickcart.config.settings import settings

LOG_LEVEL = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),  # Output to console
    ],
)

_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def get_logger(name: str):
    return logging.getLogger(name)


def new_object_id() -> str:
    return str(ObjectId())


def is_valid_object_id(value: Optional[str]) -> bool:
    return bool(value) and _OBJECT_ID_RE.match(value) is not None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_label(moment: Optional[datetime] = None) -> str:
    """Human readable timestamp used in generated snapshot names."""
    return (moment or utcnow()).strftime("%d/%m/%Y, %H:%M:%S")


def slugify(name: str) -> str:
    """Lowercase the name and collapse every run of non-alphanumerics into '-'."""
    return _SLUG_RE.sub("-", name.lower()).strip("-")


def compute_discount(
    price: Optional[float], original_price: Optional[float]
) -> Optional[int]:
    """Percentage discount of price relative to original_price.

    Returns None when either price is unknown or original_price is zero.
    """
    if price is None or not original_price:
        return None
    # Half-up rounding to match the storefront's displayed percentages
    return math.floor((original_price - price) / original_price * 100 + 0.5)
