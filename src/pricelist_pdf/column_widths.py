"""Column width resolution for one table layout pass."""

import logging
from typing import Dict, List

from .errors import DuplicateColumnKeyError, TableLayoutError
from .table_model import Column, ColumnKey

logger = logging.getLogger(__name__)


def validate_columns(columns: List[Column]) -> None:
    """Check that a table has columns and that their keys are unique."""
    if not columns:
        raise TableLayoutError("Table has no columns")
    seen = set()
    for column in columns:
        if column.key in seen:
            raise DuplicateColumnKeyError(f"Duplicate column key: {column.key!r}")
        seen.add(column.key)


class ColumnWidthResolver:
    """Computes and caches effective column widths.

    Auto-width columns share whatever the explicit columns leave of the
    table width. The first resolution of an auto column fixes the split
    for the rest of the pass, so build one resolver per table.
    """

    def __init__(self, table_width: float):
        self.table_width = table_width
        self._cache: Dict[ColumnKey, float] = {}

    def width_for(self, column: Column, all_columns: List[Column]) -> float:
        if not column.is_auto:
            return column.width

        cached = self._cache.get(column.key)
        if cached is not None:
            return cached

        width = self.table_width
        auto_count = 0
        for other in all_columns:
            if other.is_auto:
                auto_count += 1
            else:
                width -= other.width
        if auto_count > 1:
            width /= auto_count

        if width < 0:
            logger.warning(
                "Explicit column widths exceed table width %.1f; column %r resolved to %.1f",
                self.table_width, column.key, width,
            )
        logger.debug("Column width for %r is %.2f", column.key, width)
        self._cache[column.key] = width
        return width

    def widths(self, columns: List[Column]) -> List[float]:
        """Resolve every column of a table, in order."""
        return [self.width_for(column, columns) for column in columns]
