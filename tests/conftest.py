"""
Pytest configuration and shared fixtures.
"""

import logging
import math
import sys

import pytest

from pricelist_pdf.config import DocumentConfig
from pricelist_pdf.errors import MissingMeasurementError
from pricelist_pdf.layout_engine import PageFlowController, PageLayout
from pricelist_pdf.table_model import (
    Column, ColumnKey, Row, Section, SimpleTable, TextCell,
)
from pricelist_pdf.table_renderer import TableLayoutEngine


class RecordingBackend:
    """Render backend recording every call, with deterministic measurement.

    Text wraps at ``char_width`` points per character; every line is
    ``line_height`` tall.
    """

    min_unit = 1.0

    def __init__(self, char_width=5.0, line_height=10.0, missing_families=()):
        self.char_width = char_width
        self.line_height = line_height
        self.missing_families = set(missing_families)
        self.calls = []

    def begin_document(self, output_target, metadata):
        self.calls.append(("begin_document", output_target, dict(metadata)))

    def begin_page(self, width, height):
        self.calls.append(("begin_page", width, height))

    def measure_text(self, text, max_width):
        if text.font_family in self.missing_families:
            raise MissingMeasurementError(f"Font not available: {text.font_family}")
        if text.is_empty:
            return 0.0
        if text.single_line:
            return self.line_height
        chars_per_line = max(1, int(max_width // self.char_width))
        lines = sum(
            max(1, math.ceil(len(paragraph) / chars_per_line))
            for paragraph in text.plain_text.split("\n")
        )
        return lines * self.line_height

    def draw_frame(self, rect, line_width, line_color, fill_color=None):
        self.calls.append(("draw_frame", rect, line_width, line_color, fill_color))

    def draw_text(self, text, rect):
        if text.font_family in self.missing_families:
            raise MissingMeasurementError(f"Font not available: {text.font_family}")
        self.calls.append(("draw_text", text.plain_text, rect))

    def draw_image(self, image, rect):
        self.calls.append(("draw_image", image, rect))

    def end_document(self):
        self.calls.append(("end_document",))

    def names(self):
        return [call[0] for call in self.calls]

    def count(self, name):
        return self.names().count(name)

    def draw_calls(self):
        return [call for call in self.calls if call[0].startswith("draw_")]


def text_columns(*widths):
    """Columns c0, c1, ... with the given widths (-1 for auto)."""
    return [
        Column(f"Col {i}", ColumnKey(f"c{i}"), width=width)
        for i, width in enumerate(widths)
    ]


def text_row(*texts):
    return Row([TextCell(text) for text in texts])


def single_section_table(columns, rows, title=None, link_height=None):
    return SimpleTable(
        columns=columns,
        sections=[Section(rows=rows, title=title)],
        link_with_next_block_height=link_height,
    )


@pytest.fixture(autouse=True)
def configure_logging():
    """Keep test output quiet apart from warnings."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def config():
    """A4 config with zero-width frames so heights add up exactly."""
    return DocumentConfig(
        margin_left=20,
        margin_right=20,
        margin_top=10,
        margin_bottom=10,
        frame_line_width=0.0,
        cell_padding=2.0,
        header_height=15.0,
    )


def make_engine(backend, config, page_height=300.0, page_width=500.0, margin=10.0):
    """Engine on a small custom page whose first page is already begun."""
    layout = PageLayout(
        page_width=page_width,
        page_height=page_height,
        margin_left=margin,
        margin_right=margin,
        margin_top=margin,
        margin_bottom=margin,
    )
    flow = PageFlowController(backend, layout)
    flow.begin()
    return TableLayoutEngine(backend, config, flow)
