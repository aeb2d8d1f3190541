"""Page geometry and vertical flow (cursor and page breaks)."""

import logging
from dataclasses import dataclass

from .backend import RenderBackend
from .config import DocumentConfig

logger = logging.getLogger(__name__)


@dataclass
class PageLayout:
    """Defines the layout parameters for a page.

    Coordinates are measured from the top-left corner of the page.
    """
    page_width: float
    page_height: float
    margin_left: float
    margin_right: float
    margin_top: float
    margin_bottom: float

    @classmethod
    def from_config(cls, config: DocumentConfig) -> "PageLayout":
        width, height = config.page_dimensions
        return cls(
            page_width=width,
            page_height=height,
            margin_left=config.margin_left,
            margin_right=config.margin_right,
            margin_top=config.margin_top,
            margin_bottom=config.margin_bottom,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def content_bottom(self) -> float:
        """Lowest y content may reach."""
        return self.page_height - self.margin_bottom


class PageFlowController:
    """Owns the vertical cursor and decides when content rolls to a new page."""

    def __init__(self, backend: RenderBackend, layout: PageLayout):
        self.backend = backend
        self.layout = layout
        self.y = layout.margin_top
        self.page_index = 0

    def begin(self):
        """Reset flow state for a new document whose first page is already begun."""
        self.y = self.layout.margin_top
        self.page_index = 0

    @property
    def remaining(self) -> float:
        """Vertical space left between the cursor and the bottom margin."""
        return self.layout.content_bottom - self.y

    @property
    def page_has_content(self) -> bool:
        return self.y > self.layout.margin_top

    def can_fit_on_current_page(self, height: float) -> bool:
        return height <= self.remaining

    def start_new_page(self) -> int:
        """Begin a new physical page and return its index."""
        self.backend.begin_page(self.layout.page_width, self.layout.page_height)
        self.page_index += 1
        self.y = self.layout.margin_top
        logger.debug("Started page %d", self.page_index)
        return self.page_index

    def ensure_space(self, height: float) -> bool:
        """Break to a new page if height does not fit. Returns True on a break.

        The cursor is not advanced. An empty page is never broken: content
        taller than a whole page is placed at the top and overflows.
        """
        if self.can_fit_on_current_page(height):
            return False
        if not self.page_has_content:
            logger.warning(
                "Content of height %.1f exceeds page capacity %.1f on page %d",
                height, self.remaining, self.page_index,
            )
            return False
        self.start_new_page()
        return True

    def reserve(self, height: float) -> bool:
        """Advance the cursor by height, or break to a new page if it does not fit.

        Returns True if a page break occurred; the cursor then sits at the
        top margin.
        """
        if self.ensure_space(height):
            return True
        self.y += height
        return False

    def advance(self, height: float):
        self.y += height
