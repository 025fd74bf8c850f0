"""Construction helpers for the flat tables returned by CrowdFrame."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from crowdframe.domain.records import columns_for, record_values


def make_table(row_count: int, columns: Sequence[str]) -> pd.DataFrame:
    """Return a table with ``row_count`` rows of nulls and the given columns.

    Args:
        row_count: Number of rows, must be non-negative
        columns: Ordered column names

    Returns:
        DataFrame of object columns where every cell is ``None``

    Raises:
        ValueError: If ``row_count`` is negative or a column name repeats
    """
    if row_count < 0:
        raise ValueError("row_count must be non-negative")
    names = list(columns)
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate column names: {names!r}")

    return pd.DataFrame(
        {name: pd.Series([None] * row_count, dtype=object) for name in names},
        columns=names,
        index=pd.RangeIndex(row_count),
    )


def records_to_table(
    records: Sequence[Any],
    record_type: type,
    *,
    rename: Optional[Mapping[str, str]] = None,
) -> pd.DataFrame:
    """Lay ``records`` out as rows of a table declared by ``record_type``.

    Rows keep the order of ``records``. ``rename`` maps declared column names
    to the names used in the returned table.
    """

    columns = columns_for(record_type)
    table = make_table(len(records), columns)
    for position, record in enumerate(records):
        for name, value in record_values(record).items():
            if value is not None:
                table.at[position, name] = value
    if rename:
        table = table.rename(columns=dict(rename))
    return table


def append_tables(tables: Iterable[pd.DataFrame], columns: Sequence[str]) -> pd.DataFrame:
    """Stack ``tables`` in order, always returning exactly ``columns``.

    Empty inputs contribute nothing; the result has a fresh RangeIndex.
    """

    frames: List[pd.DataFrame] = [
        table.reindex(columns=list(columns)) for table in tables if len(table.index)
    ]
    if not frames:
        return make_table(0, columns)
    combined = pd.concat(frames, ignore_index=True)
    return combined.astype(object).where(combined.notna(), None)
