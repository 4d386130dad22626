"""Turn raw receipt payloads into Receipt values and a category list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from receiptscope.domain.filtering import canonical_category_id
from receiptscope.domain.receipt import Category, Receipt


def normalize_receipts(payloads: Iterable[Any]) -> list[Receipt]:
    """Parse service payloads, keeping order. Non-dict entries are skipped."""
    receipts: list[Receipt] = []
    for payload in payloads:
        if isinstance(payload, Receipt):
            receipts.append(payload)
        elif isinstance(payload, dict):
            receipts.append(Receipt.from_payload(payload))
    return receipts


def derive_categories(receipts: Sequence[Receipt]) -> list[Category]:
    """Distinct categories in order of first appearance.

    Receipts missing either the category id or name are left out. If two
    receipts disagree on the name for one id, the later name wins but the
    category keeps its original position.
    """
    seen: dict[str, Category] = {}
    for receipt in receipts:
        if receipt.category_id is None or not receipt.category_name:
            continue
        key = canonical_category_id(receipt.category_id)
        if key is None:
            continue
        seen[key] = Category(id=receipt.category_id, name=receipt.category_name)
    return list(seen.values())
