"""Configuration dataclasses and YAML loading for document rendering."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple
import yaml
from reportlab.lib.pagesizes import A4, A5, LETTER, landscape

from .errors import ConfigError


def points_from_mm(value: float) -> float:
    """Convert millimetres to PDF points."""
    return (value / 25.4) * 72


PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "A4": A4,
    "A5": A5,
    "LETTER": LETTER,
}

ORIENTATIONS = ("portrait", "landscape")

# Metadata keys forwarded to the PDF document info
METADATA_KEYS = ("title", "author", "subject")


@dataclass
class DocumentConfig:
    """Page geometry, typography and metadata for one document."""

    page_size: str = "A4"
    orientation: str = "portrait"

    margin_left: float = field(default_factory=lambda: points_from_mm(25))
    margin_top: float = field(default_factory=lambda: points_from_mm(10))
    margin_right: float = field(default_factory=lambda: points_from_mm(10))
    margin_bottom: float = field(default_factory=lambda: points_from_mm(10))

    # Base family; bold and italic variants are derived from it
    font_family: str = "Helvetica"
    base_font_size: float = 9.0
    title_font_size: float = 12.0

    frame_line_width: float = field(default_factory=lambda: points_from_mm(0.2))
    min_block_spacing: float = field(default_factory=lambda: points_from_mm(5))
    cell_padding: float = 2.0
    header_height: float = 15.0

    page_title: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Normalise and check page size, orientation and metadata keys."""
        self.page_size = self.page_size.upper()
        if self.page_size not in PAGE_SIZES:
            raise ConfigError(
                f"Unknown page size: {self.page_size} "
                f"(expected one of {', '.join(PAGE_SIZES)})"
            )
        self.orientation = self.orientation.lower()
        if self.orientation not in ORIENTATIONS:
            raise ConfigError(f"Unknown orientation: {self.orientation}")
        unknown = set(self.metadata) - set(METADATA_KEYS)
        if unknown:
            raise ConfigError(f"Unsupported metadata keys: {sorted(unknown)}")

    @property
    def page_dimensions(self) -> Tuple[float, float]:
        """(width, height) in points after applying orientation."""
        size = PAGE_SIZES[self.page_size]
        if self.orientation == "landscape":
            return landscape(size)
        return size

    @property
    def page_width(self) -> float:
        return self.page_dimensions[0]

    @property
    def page_height(self) -> float:
        return self.page_dimensions[1]

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def table_width(self) -> float:
        return self.content_width

    @classmethod
    def from_yaml(cls, path: Path) -> "DocumentConfig":
        """Load configuration from a YAML file.

        Margins, line widths and spacing may be given in millimetres by
        suffixing the key with ``_mm`` (e.g. ``margin_left_mm: 20``).
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")

        for key in list(data):
            if key.endswith("_mm"):
                data[key[:-3]] = points_from_mm(float(data.pop(key)))

        if "metadata" in data:
            data["metadata"] = {k: str(v) for k, v in (data["metadata"] or {}).items()}

        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = {
            "page_size": self.page_size,
            "orientation": self.orientation,
            "margin_left": self.margin_left,
            "margin_top": self.margin_top,
            "margin_right": self.margin_right,
            "margin_bottom": self.margin_bottom,
            "font_family": self.font_family,
            "base_font_size": self.base_font_size,
            "title_font_size": self.title_font_size,
            "frame_line_width": self.frame_line_width,
            "min_block_spacing": self.min_block_spacing,
            "cell_padding": self.cell_padding,
            "header_height": self.header_height,
            "page_title": self.page_title,
            "metadata": dict(self.metadata),
        }
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> DocumentConfig:
    """Load config from path or return default config."""
    if path is None:
        return DocumentConfig()
    return DocumentConfig.from_yaml(path)
