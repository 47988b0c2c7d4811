# domain/catalog.py
"""
Layout of the wide `items_new` table.

Each row is one supplier/style. Every category owns an item-name column and
a width column; the rate columns were named differently over time, so each
category lists the rate columns to probe, in order.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from domain.models import Item
from utils.formatting import parse_number


@dataclass(frozen=True)
class CategoryColumns:
    item_col: str
    width_col: str
    rate_cols: Tuple[str, ...]


CATEGORY_COLUMNS: Dict[str, CategoryColumns] = {
    "WARP": CategoryColumns(
        "warp", "width_warp",
        ("rate_warp", "rate", "warp_rate"),
    ),
    "CKU": CategoryColumns(
        "cku", "width_cku",
        ("rate_cku", "rate", "cku_rate"),
    ),
    "EMBROIDARY": CategoryColumns(
        "embroidery", "width_embroidery",
        ("rate_embroidery", "rate_embroidary", "rate", "embroidery_rate", "embroidary_rate"),
    ),
    "CRO": CategoryColumns(
        "cro", "width_cro",
        ("rate_cro", "rate", "cro_rate"),
    ),
    "ELASTIC": CategoryColumns(
        "elastic", "width_elastic",
        ("rate_elastic", "rate", "elastic_rate"),
    ),
    "EYE-N-HOOK": CategoryColumns(
        "eye_n_hook", "width_eye_n_hook",
        ("rate_eye_n_hook", "rate_eye-n-hook", "rate", "eye_n_hook_rate", "eye-n-hook_rate"),
    ),
    "CUP": CategoryColumns(
        "cup", "width_cup",
        ("rate_cup", "rate", "cup_rate"),
    ),
    "TLU": CategoryColumns(
        "tlu", "width_tlu",
        ("rate_tlu", "rate", "tlu_rate"),
    ),
    "VAU": CategoryColumns(
        "vau", "width_vau",
        ("rate_vau", "rate", "vau_rate"),
    ),
    "PRINTING": CategoryColumns(
        "printing", "width_printing",
        ("rate_printing", "rate", "printing_rate"),
    ),
}


def resolve_rate(row: Mapping[str, Any], columns: CategoryColumns) -> float:
    """First positive rate among the category's rate columns, else 0."""
    for col in columns.rate_cols:
        val = row.get(col)
        if val is None or val == "":
            continue
        rate = parse_number(val)
        if rate > 0:
            return rate
    return 0.0


def flatten_item_row(row: Mapping[str, Any]) -> List[Item]:
    """
    Turn one wide row into one Item per populated category column.
    Categories whose item-name cell is blank are skipped.
    """
    items: List[Item] = []

    for category, columns in CATEGORY_COLUMNS.items():
        raw_name = row.get(columns.item_col)
        item_name = str(raw_name).strip() if raw_name is not None else ""
        if not item_name:
            continue

        width = row.get(columns.width_col)
        items.append(
            Item(
                id=f"{row.get('id')}_{category}",
                category=category,
                item_name=item_name,
                default_rate=resolve_rate(row, columns),
                default_width=str(width) if width not in (None, "") else "",
            )
        )

    return items
