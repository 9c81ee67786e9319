from __future__ import annotations

from typing import Any, Optional, Sequence

from schemas.viewer import SortConfig, TableView, record_fields
from utils.formatting import format_value

SORT_ARROWS = {"ascending": "↑", "descending": "↓"}
EMPTY_TABLE = "No data to display."


def build_table(
    records: Sequence[Any],
    sort_config: SortConfig,
    *,
    total: Optional[int] = None,
) -> TableView:
    """
    Columns come from the first displayed record, in its field order.
    """
    total = len(records) if total is None else total
    caption = f"Showing {len(records)} of {total} records."

    if not records:
        return TableView(columns=[], headers=[], rows=[], caption=caption)

    columns = [str(c) for c in record_fields(records[0]).keys()]

    headers = []
    for col in columns:
        if col == sort_config.key:
            headers.append(f"{col} {SORT_ARROWS[sort_config.direction]}")
        else:
            headers.append(col)

    rows = []
    for record in records:
        fields = record_fields(record)
        rows.append([format_value(fields.get(col)) for col in columns])

    return TableView(columns=columns, headers=headers, rows=rows, caption=caption)


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def table_markdown(view: TableView, *, max_rows: Optional[int] = None) -> str:
    if not view.columns:
        return EMPTY_TABLE

    rows = view.rows if max_rows is None else view.rows[:max_rows]

    header = "| " + " | ".join(_cell(h) for h in view.headers) + " |"
    sep = "| " + " | ".join(["---"] * len(view.headers)) + " |"
    body = "\n".join("| " + " | ".join(_cell(c) for c in r) + " |" for r in rows)
    return "\n".join(line for line in (header, sep, body) if line)
