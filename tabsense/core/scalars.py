"""
Scalar value model for row data.

Row values arrive duck-typed: numbers, strings, booleans, None, or pandas
null markers, with keys that may be absent from some rows. This module turns
each value into an explicit ScalarKind and provides the single set of
coercion rules (missing test, numeric coercion, stringification) that every
analysis component shares.

Coercion rules:
    - Missing: None, absent key, empty string, NaN / pd.NA / NaT
    - Numeric: finite real numbers, or strings holding a decimal/scientific
      literal (surrounding whitespace allowed) or a 0x/0o/0b integer literal.
      Booleans are never numeric.
    - Stringification: booleans -> "true"/"false", integral floats lose
      their ".0", so 5, 5.0 and "5" compare equal.
"""

import math
import numbers
import re
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from tabsense.core.exceptions import ColumnNotFoundError

Row = Mapping[str, Any]

# Integer literals with a radix prefix (unsigned, like the decimal form)
_PREFIXED_INTEGER = re.compile(r'^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$')


class ScalarKind(Enum):
    """Tagged kind of a single row value."""
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    MISSING = "missing"


def is_missing(value: Any) -> bool:
    """Return True for None, empty string, and pandas null scalars."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Array-like values have no single truth value; they are not missing
        return False


def is_boolean(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def classify_scalar(value: Any) -> ScalarKind:
    """
    Tag a raw value with its ScalarKind.

    Booleans are checked before numbers because bool subclasses int.
    Numeric-looking strings are TEXT: the kind describes the value as
    stored, not what it can be coerced to.
    """
    if is_missing(value):
        return ScalarKind.MISSING
    if is_boolean(value):
        return ScalarKind.BOOLEAN
    if isinstance(value, numbers.Real):
        return ScalarKind.NUMBER
    return ScalarKind.TEXT


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a value to a finite float, or None if it is not numeric.

    Whitespace-only strings are not numeric: "  " gives None rather than 0.

    Args:
        value: Raw row value

    Returns:
        The numeric value, or None when coercion fails

    Example:
        >>> to_number(" 1e3 ")
        1000.0
        >>> to_number("0x1F")
        31.0
        >>> to_number(True) is None
        True
    """
    if is_boolean(value):
        return None

    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else None

    if not isinstance(value, str):
        return None

    text = value.strip()
    # float() accepts digit separators; spreadsheet numbers never use them
    if not text or '_' in text:
        return None

    try:
        if _PREFIXED_INTEGER.match(text):
            number = float(int(text, 0))
        else:
            number = float(text)
    except (ValueError, OverflowError):
        return None

    return number if math.isfinite(number) else None


def is_numeric_value(value: Any) -> bool:
    return to_number(value) is not None


def stringify(value: Any) -> str:
    """
    Convert a value to the string form used for counting and comparison.

    Example:
        >>> stringify(5.0), stringify(5), stringify("5")
        ('5', '5', '5')
        >>> stringify(False)
        'false'
    """
    if is_boolean(value):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        number = float(value)
        if number.is_integer():
            return str(int(number))
        return repr(number)
    return str(value)


def union_columns(rows: Sequence[Row]) -> List[str]:
    """
    Collect column names across all rows in first-seen order.

    This order is the engine's column iteration order everywhere (summary
    output, validation passes, chat command matching).
    """
    seen: Dict[str, None] = {}
    for row in rows:
        if not row:
            continue
        for key in row.keys():
            if key not in seen:
                seen[key] = None
    return list(seen)


def column_values(rows: Sequence[Row], column: str) -> Iterator[Any]:
    """Yield the value of ``column`` for every row (None when absent)."""
    for row in rows:
        yield row.get(column) if row else None


def present_values(rows: Sequence[Row], column: str) -> List[Any]:
    """Return the non-missing values of ``column`` in row order."""
    return [value for value in column_values(rows, column) if not is_missing(value)]


def require_column(rows: Sequence[Row], column: str, operation: str) -> None:
    """
    Raise ColumnNotFoundError when a non-empty row set lacks ``column``.

    An empty row set passes: operations on it return empty results.
    """
    if not rows:
        return
    columns = union_columns(rows)
    if column not in columns:
        raise ColumnNotFoundError(
            operation=operation,
            column=column,
            available_columns=columns
        )


def rows_from_dataframe(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert an already-loaded pandas DataFrame into engine rows.

    Null cells become None and numpy scalars become plain Python scalars, so
    the result carries the same value kinds as rows decoded by any other
    host.

    Args:
        df: DataFrame whose columns become row keys

    Returns:
        List of row dictionaries in DataFrame order
    """
    columns = [str(column) for column in df.columns]
    rows: List[Dict[str, Any]] = []

    for record in df.itertuples(index=False, name=None):
        row: Dict[str, Any] = {}
        for column, value in zip(columns, record):
            if is_missing(value):
                row[column] = None
            elif isinstance(value, np.generic):
                row[column] = value.item()
            else:
                row[column] = value
        rows.append(row)

    return rows
