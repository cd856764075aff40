"""
Cursebreakers Backend - Input Sanitization
===========================================

What:  Strips markup from user-supplied free text.
How:   bleach.clean() with no allowed tags and strip=True removes every tag
       and escapes stray angle brackets; the result is trimmed.
Who:   Request schemas call these from their field validators, so every
       username, title, content, hashtag, comment, category and link is
       cleaned at the write boundary, before validation or persistence.

Output escaping is left to the response layer: all responses are JSON.
Passwords and email addresses are never passed through here.
"""

from typing import Iterable, List, Optional

import bleach


def sanitize_text(value: str) -> str:
    """Remove all HTML tags from `value` and strip surrounding whitespace."""
    return bleach.clean(value, tags=[], attributes={}, strip=True).strip()


def sanitize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return sanitize_text(value)


def sanitize_list(values: Optional[Iterable[str]]) -> List[str]:
    """Sanitize each entry and drop the ones left empty."""
    if not values:
        return []
    cleaned = (sanitize_text(v) for v in values)
    return [v for v in cleaned if v]
