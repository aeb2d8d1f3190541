"""Exception types raised by the layout engine and its backends."""

from typing import Optional


class TableLayoutError(Exception):
    """Base class for all layout failures."""


class ConfigError(TableLayoutError, ValueError):
    """Invalid document configuration."""


class MalformedRowError(TableLayoutError):
    """A row's cell count does not match the table's column count.

    Recoverable: the layout engine skips the row and keeps going.
    """

    def __init__(self, cell_count: int, column_count: int,
                 section: Optional[int] = None, row: Optional[int] = None):
        self.cell_count = cell_count
        self.column_count = column_count
        self.section = section
        self.row = row
        where = ""
        if section is not None and row is not None:
            where = f" (section {section}, row {row})"
        super().__init__(
            f"Row has {cell_count} cells but table has {column_count} columns{where}"
        )


class InvalidMergeError(TableLayoutError, ValueError):
    """A merge count is not positive or spans past the last column."""

    def __init__(self, merged_columns: int, column_index: int, column_count: int):
        self.merged_columns = merged_columns
        self.column_index = column_index
        self.column_count = column_count
        super().__init__(
            f"Cannot merge {merged_columns} columns starting at column "
            f"{column_index} of {column_count}"
        )


class MissingMeasurementError(TableLayoutError):
    """The backend cannot measure or draw a requested style."""


class DuplicateColumnKeyError(TableLayoutError, ValueError):
    """Two columns of one table share an identity key."""


class DocumentStateError(TableLayoutError, RuntimeError):
    """An operation was called in the wrong document lifecycle state."""
