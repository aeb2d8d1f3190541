"""
Tests for the TableDocument lifecycle.
"""

import pytest

from pricelist_pdf.config import DocumentConfig, points_from_mm
from pricelist_pdf.document import TableDocument, render_tables
from pricelist_pdf.errors import DocumentStateError
from pricelist_pdf.sample_data import generate_price_list

from conftest import RecordingBackend, single_section_table, text_columns, text_row


@pytest.fixture
def document(backend, config):
    return TableDocument("out.pdf", config, backend)


class TestLifecycle:

    def test_begin_starts_document_and_first_page(self, backend):
        config = DocumentConfig(metadata={"title": "Prices", "author": "Shop"})
        doc = TableDocument("out.pdf", config, backend)

        doc.begin()

        assert backend.calls == [
            ("begin_document", "out.pdf", {"title": "Prices", "author": "Shop"}),
            ("begin_page", config.page_width, config.page_height),
        ]
        assert doc.y == config.margin_top
        assert doc.page_count == 1

    def test_operations_require_begin(self, document):
        with pytest.raises(DocumentStateError):
            document.draw_table(single_section_table(text_columns(100), []))
        with pytest.raises(DocumentStateError):
            document.add_space(10)
        with pytest.raises(DocumentStateError):
            document.finish()

    def test_begin_twice(self, document):
        document.begin()

        with pytest.raises(DocumentStateError):
            document.begin()

    def test_finish_ends_document(self, document, backend):
        document.begin()
        document.finish()

        assert backend.calls[-1] == ("end_document",)
        with pytest.raises(DocumentStateError):
            document.add_space(10)

    def test_context_manager(self, backend, config):
        with TableDocument("out.pdf", config, backend) as doc:
            doc.draw_table(single_section_table(text_columns(100), [text_row("a")]))

        assert backend.names()[0] == "begin_document"
        assert backend.names()[-1] == "end_document"

    def test_context_manager_does_not_finish_on_error(self, backend, config):
        with pytest.raises(RuntimeError):
            with TableDocument("out.pdf", config, backend):
                raise RuntimeError("boom")

        assert "end_document" not in backend.names()


class TestBlocks:

    def test_page_title(self, document, backend, config):
        document.begin()

        document.draw_page_title("Spring Price List")

        title_call = backend.calls[-1]
        assert title_call[0] == "draw_text"
        assert title_call[1] == "Spring Price List"
        assert title_call[2].x == config.margin_left
        assert title_call[2].width == pytest.approx(config.content_width)
        assert document.y == pytest.approx(10 + 10 + points_from_mm(5))

    def test_page_title_from_config(self, backend):
        config = DocumentConfig(page_title="Catalogue")
        doc = TableDocument("out.pdf", config, backend)
        doc.begin()

        doc.draw_page_title()

        assert backend.calls[-1][1] == "Catalogue"

    def test_no_title_draws_nothing(self, document, backend):
        document.begin()
        y = document.y

        document.draw_page_title()

        assert backend.draw_calls() == []
        assert document.y == y

    def test_add_space_breaks_page(self, document, backend, config):
        document.begin()

        assert document.add_space(100) is False
        assert document.add_space(config.page_height) is True
        assert document.page_count == 2
        assert document.y == config.margin_top

    def test_tables_are_spaced(self, backend, config):
        tables = [
            single_section_table(text_columns(100), [text_row("a")]),
            single_section_table(text_columns(100), [text_row("b")]),
        ]

        results = render_tables("out.pdf", tables, config, backend)

        first, second = results[0].placements[0], results[1].placements[0]
        assert second.frame.y == pytest.approx(first.frame.bottom + points_from_mm(5) + 15)
        assert first.frame.y == config.margin_top + 15


class TestRepeatability:

    def test_same_table_twice_gives_same_draw_calls(self, config):
        table = generate_price_list(num_sections=2, rows_per_section=15, seed=7)
        first, second = RecordingBackend(), RecordingBackend()

        first_results = render_tables("a.pdf", [table], config, first)
        second_results = render_tables("a.pdf", [table], config, second)

        assert first_results[0].column_widths == second_results[0].column_widths
        assert first.calls == second.calls

    def test_tables_with_colliding_keys_get_their_own_widths(self, backend, config):
        narrow = single_section_table(text_columns(-1, 300), [text_row("a", "b")])
        wide = single_section_table(text_columns(-1, -1), [text_row("a", "b")])

        results = render_tables("out.pdf", [narrow, wide], config, backend)

        assert results[0].column_widths[0] == pytest.approx(config.table_width - 300)
        assert results[1].column_widths == pytest.approx([config.table_width / 2] * 2)
