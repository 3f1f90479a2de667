"""
Locale-aware string ordering for display lists.

Term names are Japanese. Display orderings use ICU's ja_JP collation:
kana collate by reading and kanji follow JIS X 0208 order.
"""
from typing import Optional, Tuple

import icu

_collator = icu.Collator.createInstance(icu.Locale("ja_JP"))


def collation_key(text: Optional[str]) -> bytes:
    """Sort key for text under the Japanese collator (None sorts as empty)."""
    return _collator.getSortKey(text or "")


def order_key(order: Optional[int]) -> Tuple[bool, int]:
    """Sort key for an optional numeric order; missing values sort last."""
    if order is None:
        return (True, 0)
    return (False, order)
