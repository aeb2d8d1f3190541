"""
Tests for ColumnWidthResolver.
"""

import pytest

from pricelist_pdf.column_widths import ColumnWidthResolver, validate_columns
from pricelist_pdf.errors import DuplicateColumnKeyError, TableLayoutError
from pricelist_pdf.table_model import Column, ColumnKey

from conftest import text_columns


class TestColumnWidthResolver:

    def test_explicit_and_auto_widths(self):
        columns = text_columns(100, -1, -1)
        resolver = ColumnWidthResolver(400)

        assert resolver.widths(columns) == [100, 150, 150]

    def test_single_auto_column_takes_remainder(self):
        columns = text_columns(50, 60, -1)

        assert ColumnWidthResolver(400).widths(columns) == [50, 60, 290]

    def test_all_auto_columns_share_equally(self):
        columns = text_columns(-1, -1, -1, -1)

        assert ColumnWidthResolver(400).widths(columns) == [100, 100, 100, 100]

    def test_zero_width_is_auto(self):
        columns = text_columns(0, 100)

        assert ColumnWidthResolver(300).widths(columns) == [200, 100]

    @pytest.mark.parametrize("widths,table_width", [
        ((100, -1, -1), 400),
        ((-1,), 523.3),
        ((-1, -1, -1), 100),
        ((12.5, -1, 40, -1, -1), 555.0),
        ((-1, 200, -1, 33.3, -1, -1, -1), 612.0),
    ])
    def test_widths_sum_to_table_width(self, widths, table_width):
        columns = text_columns(*widths)

        resolved = ColumnWidthResolver(table_width).widths(columns)

        assert sum(resolved) == pytest.approx(table_width)

    def test_auto_width_is_cached_for_the_pass(self):
        columns = text_columns(100, -1, -1)
        resolver = ColumnWidthResolver(400)
        assert resolver.width_for(columns[1], columns) == 150

        # A later call with a different column set keeps the first split
        fewer = columns[:2]
        assert resolver.width_for(columns[1], fewer) == 150

    def test_fresh_resolver_does_not_see_previous_table(self):
        first = [Column("A", ColumnKey("name")), Column("B", ColumnKey("price"), width=100)]
        second = [Column("A", ColumnKey("name")), Column("B", ColumnKey("x")), Column("C", ColumnKey("y"))]

        assert ColumnWidthResolver(400).widths(first) == [300, 100]
        assert ColumnWidthResolver(400).widths(second) == [pytest.approx(400 / 3)] * 3

    def test_explicit_widths_are_not_cached(self):
        column = Column("A", ColumnKey("a"), width=80)
        resolver = ColumnWidthResolver(400)

        assert resolver.width_for(column, [column]) == 80
        column.width = 90
        assert resolver.width_for(column, [column]) == 90

    def test_negative_remainder_is_reported(self, caplog):
        columns = text_columns(300, 200, -1)

        with caplog.at_level("WARNING"):
            widths = ColumnWidthResolver(400).widths(columns)

        assert widths[2] == -100
        assert "exceed table width" in caplog.text


class TestValidateColumns:

    def test_duplicate_keys_rejected(self):
        columns = [Column("A", ColumnKey("k")), Column("B", ColumnKey("k"))]

        with pytest.raises(DuplicateColumnKeyError):
            validate_columns(columns)

    def test_empty_columns_rejected(self):
        with pytest.raises(TableLayoutError):
            validate_columns([])

    def test_unique_keys_accepted(self):
        validate_columns(text_columns(-1, 100))
