"""Generate demonstration price lists."""

from typing import List, Optional
import numpy as np
from faker import Faker
from reportlab.lib.colors import HexColor

from .table_model import (
    Alignment, CellAttributes, Column, ColumnKey, FontWeight, FontWeightClass,
    Row, Section, SimpleTable, TextAlignment, TextCell,
)


CATEGORIES = [
    "Fasteners",
    "Hand Tools",
    "Power Tools",
    "Electrical",
    "Plumbing",
    "Paint & Supplies",
    "Garden",
    "Safety Equipment",
]

PRODUCT_NOUNS = [
    "Bracket", "Clamp", "Wrench", "Hinge", "Valve", "Fitting", "Socket",
    "Coupler", "Anchor", "Spacer", "Washer", "Adapter", "Drill Bit", "Brush",
]

UNITS = ["pc", "box", "set", "m", "kg", "pack", "roll"]

CODE_PREFIXES = ["A", "B", "C", "F", "H", "P", "S", "T"]

NOTE_TEMPLATES = [
    "Prices for {category} include VAT",
    "Bulk discounts available on request",
    "* Items marked with an asterisk ship within {days} days",
    "Discontinued lines sold while stocks last",
]

NOTE_FILL = HexColor("#F0F0F0")


def price_list_columns() -> List[Column]:
    """Code / Item / Description / Unit / Price, two of them auto-width."""
    code = Column("Code", ColumnKey("code"), width=50)
    item = Column("Item", ColumnKey("item"))
    item.add_text_attribute(Alignment(TextAlignment.LEFT))
    description = Column("Description", ColumnKey("description"))
    description.add_text_attribute(Alignment(TextAlignment.LEFT))
    unit = Column("Unit", ColumnKey("unit"), width=40)
    price = Column("Price", ColumnKey("price"), width=60)
    price.add_text_attribute(Alignment(TextAlignment.RIGHT))
    price.add_text_attribute(FontWeight(FontWeightClass.BOLD))
    return [code, item, description, unit, price]


def generate_product_code(rng: np.random.Generator) -> str:
    prefix = CODE_PREFIXES[int(rng.integers(0, len(CODE_PREFIXES)))]
    return f"{prefix}-{rng.integers(1000, 9999)}"


def generate_product_row(rng: np.random.Generator, fake: Faker) -> Row:
    noun = PRODUCT_NOUNS[int(rng.integers(0, len(PRODUCT_NOUNS)))]
    item = f"{fake.color_name()} {noun}"
    description = fake.sentence(nb_words=int(rng.integers(4, 16)))
    unit = UNITS[int(rng.integers(0, len(UNITS)))]
    price = float(rng.uniform(0.5, 750))

    return Row([
        TextCell(generate_product_code(rng)),
        TextCell(item),
        TextCell(description),
        TextCell(unit),
        TextCell(f"{price:,.2f}"),
    ])


def generate_note_row(category: str, rng: np.random.Generator, column_count: int) -> Row:
    """A note spanning every column, italic and shaded."""
    template = NOTE_TEMPLATES[int(rng.integers(0, len(NOTE_TEMPLATES)))]
    text = template.format(category=category.lower(), days=int(rng.integers(2, 15)))
    note = TextCell(
        text,
        text_attributes=[
            Alignment(TextAlignment.LEFT),
            FontWeight(FontWeightClass.ITALIC),
        ],
        attributes=CellAttributes(fill_color=NOTE_FILL, merged_columns=column_count),
    )
    return Row([note] + [None] * (column_count - 1))


def generate_price_list(
    num_sections: int = 3,
    rows_per_section: int = 12,
    seed: int = 42,
    note_probability: float = 0.1,
    link_height: Optional[float] = None,
) -> SimpleTable:
    """Generate a price list with one titled section per product category."""
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(seed)

    columns = price_list_columns()
    num_sections = min(num_sections, len(CATEGORIES))
    categories = rng.choice(CATEGORIES, size=num_sections, replace=False)

    sections = []
    for category in categories:
        category = str(category)
        rows = []
        for _ in range(rows_per_section):
            rows.append(generate_product_row(rng, fake))
            if rng.random() < note_probability:
                rows.append(generate_note_row(category, rng, len(columns)))
        sections.append(Section(rows=rows, title=category))

    return SimpleTable(
        columns=columns,
        sections=sections,
        link_with_next_block_height=link_height,
    )
