from typing import Optional

from quickcart.shared.exceptions import ValidationException
from quickcart.shared.utils import is_valid_object_id


def require_object_id(value: Optional[str], label: str = "ID") -> str:
    """Reject malformed identifiers before they reach the store"""
    if not is_valid_object_id(value):
        raise ValidationException(detail=f"Invalid {label}")
    return value


def like_pattern(term: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
