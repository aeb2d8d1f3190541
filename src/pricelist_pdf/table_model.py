"""Table, column, row and cell definitions supplied by callers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, NewType, Optional, Protocol, Tuple, Union

from reportlab.lib.colors import Color, black


# Column identity, unique within one table
ColumnKey = NewType("ColumnKey", str)

# Width value marking a column as auto-sized
AUTO_WIDTH = -1.0


@dataclass(frozen=True)
class Rect:
    """Rectangle in layout coordinates (origin top-left, y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    def inset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)


class TextAlignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class FontWeightClass(Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    BOLD = "bold"


# Text attributes. Ranges are half-open [start, end); end=None runs to the
# end of the text.

@dataclass(frozen=True)
class Alignment:
    """Paragraph alignment for the whole cell text."""
    value: TextAlignment


@dataclass(frozen=True)
class FontWeight:
    value: FontWeightClass
    start: int = 0
    end: Optional[int] = None


@dataclass(frozen=True)
class FontSizeAbsolute:
    value: float
    start: int = 0
    end: Optional[int] = None


@dataclass(frozen=True)
class FontSizeRelative:
    """Font size as a multiple of the base size."""
    value: float
    start: int = 0
    end: Optional[int] = None


TextAttribute = Union[Alignment, FontWeight, FontSizeAbsolute, FontSizeRelative]


@dataclass
class Column:
    """A table column. Widths <= 0 are resolved automatically."""
    title: str
    key: ColumnKey
    width: float = AUTO_WIDTH
    text_attributes: List[TextAttribute] = field(default_factory=list)

    @property
    def is_auto(self) -> bool:
        return self.width <= 0

    def add_text_attribute(self, attribute: TextAttribute) -> None:
        self.text_attributes.append(attribute)


@dataclass
class CellAttributes:
    """Frame, fill and merge settings for a single cell."""
    frame_width: Optional[float] = None  # None: document default
    no_frame: bool = False
    frame_color: Color = black
    fill_color: Optional[Color] = None
    merged_columns: Optional[int] = None  # slots spanned, including this one


@dataclass
class EmptyCell:
    attributes: CellAttributes = field(default_factory=CellAttributes)


@dataclass
class TextCell:
    text: str
    text_attributes: List[TextAttribute] = field(default_factory=list)
    attributes: CellAttributes = field(default_factory=CellAttributes)


@dataclass
class ImageCell:
    """Image handle plus its intrinsic size, used for aspect-ratio fitting."""
    image: Any
    width: float
    height: float
    attributes: CellAttributes = field(default_factory=CellAttributes)


@dataclass
class CustomCell:
    """Cell drawn by a callback receiving the cell frame."""
    draw: Callable[[Rect], None]
    attributes: CellAttributes = field(default_factory=CellAttributes)


Cell = Union[EmptyCell, TextCell, ImageCell, CustomCell]


@dataclass
class Row:
    """One nominal slot per column; None slots are empty cells."""
    cells: List[Optional[Cell]]


class TableDataSource(Protocol):
    """Read-only table data consumed by the layout engine."""

    @property
    def columns(self) -> List[Column]: ...

    @property
    def section_count(self) -> int: ...

    @property
    def link_with_next_block_height(self) -> Optional[float]: ...

    def row_count(self, section: int) -> int: ...

    def section_title(self, section: int) -> Optional[str]: ...

    def row_at(self, row: int, section: int) -> Row: ...


@dataclass
class Section:
    rows: List[Row] = field(default_factory=list)
    title: Optional[str] = None


@dataclass
class SimpleTable:
    """List-backed TableDataSource."""
    columns: List[Column]
    sections: List[Section] = field(default_factory=list)
    link_with_next_block_height: Optional[float] = None

    @property
    def section_count(self) -> int:
        return len(self.sections)

    def row_count(self, section: int) -> int:
        return len(self.sections[section].rows)

    def section_title(self, section: int) -> Optional[str]:
        return self.sections[section].title

    def row_at(self, row: int, section: int) -> Row:
        return self.sections[section].rows[row]


@dataclass(frozen=True)
class TextRun:
    """A span of text sharing one weight and size."""
    text: str
    weight: FontWeightClass = FontWeightClass.NORMAL
    size: float = 9.0


@dataclass(frozen=True)
class StyledText:
    """Measured/drawn unit of text handed to the render backend."""
    runs: Tuple[TextRun, ...]
    alignment: TextAlignment = TextAlignment.CENTER
    font_family: str = "Helvetica"
    single_line: bool = False  # truncate instead of wrapping

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_empty(self) -> bool:
        return not self.plain_text
