"""
Items column — cart snapshot as the JSON the storefront reads back.
"""

from __future__ import annotations

import json
from typing import Any

from vitrine.totals import CartLine, format_amount


def item_record(line: CartLine) -> dict[str, Any]:
    return {
        "id": line.item_id,
        "name": line.name,
        "size": line.size_label,
        "qty": line.quantity,
        "price": format_amount(line.unit_price),
        "store": line.merchant_id,
        "store_name": line.merchant_name,
    }


def dump_items(lines: tuple[CartLine, ...] | list[CartLine]) -> str:
    return json.dumps([item_record(line) for line in lines], ensure_ascii=False)


def count_items(raw: object) -> int:
    """Total quantity in a stored items column. Unreadable columns count as 0."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return 0
    if not isinstance(raw, list):
        return 0
    total = 0
    for item in raw:
        if isinstance(item, dict):
            qty = item.get("qty", 1)
            total += qty if isinstance(qty, int) else 1
    return total


__all__ = ("item_record", "dump_items", "count_items")
