"""Category filtering over a receipt snapshot.

The receipts list and the category picker do not agree on how a category id
is typed: the service emits numbers, while selections made in a UI or on the
command line arrive as text. Both sides go through canonical_category_id()
before comparison so that 7, 7.0, "7", "7.0" and " 007 " all select the
same category.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from receiptscope.domain.receipt import Receipt

ALL_CATEGORIES = "all"


# Integral keys with more digits than this stay in exponent form.
_MAX_INTEGRAL_DIGITS = 4000


def _decimal_key(value: Decimal) -> str | None:
    if not value.is_finite():
        return None
    try:
        if value == value.to_integral_value() and value.adjusted() < _MAX_INTEGRAL_DIGITS:
            return str(int(value))
        return str(value.normalize())
    except ArithmeticError:
        # Exponent outside the decimal context.
        return None


def canonical_category_id(value: Any) -> str | None:
    """Return the comparison key for a category identifier.

    - numbers and numeric strings share one key: 7, 7.0, "7", " 007 " and
      "7.0" all become "7"
    - other strings are compared after stripping whitespace
    - None, booleans and empty strings have no key (never match)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        return _decimal_key(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return text
    return _decimal_key(number) or text


def is_all_selector(selector: Any) -> bool:
    if selector is None:
        return True
    if isinstance(selector, str):
        stripped = selector.strip()
        return stripped == "" or stripped.lower() == ALL_CATEGORIES
    return False


def filter_receipts(receipts: Sequence[Receipt], selector: Any) -> list[Receipt]:
    """Return receipts whose category matches selector, preserving order.

    An "all" selector (or None / empty) returns every receipt. An unmatched
    selector returns an empty list.
    """
    if is_all_selector(selector):
        return list(receipts)

    wanted = canonical_category_id(selector)
    if wanted is None:
        return []
    return [r for r in receipts if canonical_category_id(r.category_id) == wanted]
