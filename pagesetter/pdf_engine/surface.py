"""
Drawing surfaces.

The layout code only ever places text, strokes lines, fills/strokes
rectangles and places images. DrawingSurface is that capability; the
ReportLab canvas is the production backend and RecordingSurface captures
the calls for dry runs and tests.

Coordinates are millimetres from the bottom-left corner of the page.
Line thickness and font sizes are points. Rectangles are anchored at
their top-left corner and extend downward, matching how the flow
cursor moves.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from reportlab.lib.colors import Color, black
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pagesetter.exceptions import OutputError

from .units import mm_to_pt


logger = logging.getLogger(__name__)


class DrawingSurface(ABC):
    """Paginated drawing target. The first page is open after construction."""

    def __init__(self, page_width: float, page_height: float):
        self.page_width = page_width
        self.page_height = page_height
        self.page_number = 1

    @abstractmethod
    def place_text(self, text: str, x: float, y: float, font_name: str,
                   font_size: float, color: Color = black) -> None:
        """Draw a single run with its baseline at y"""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  thickness: float = 1.0, color: Color = black) -> None:
        """Stroke a straight line"""

    @abstractmethod
    def draw_rect(self, x: float, top: float, width: float, height: float,
                  fill: Optional[Color] = None, stroke: Optional[Color] = None,
                  thickness: float = 1.0) -> None:
        """Fill and/or stroke the rectangle spanning [top - height, top]"""

    @abstractmethod
    def draw_image(self, image, x: float, y: float, width: float, height: float) -> None:
        """Place a decoded PIL image with its bottom-left corner at (x, y)"""

    def start_page(self) -> None:
        """Close the current page and open the next one"""
        self._finish_page()
        self.page_number += 1

    @abstractmethod
    def _finish_page(self) -> None:
        pass

    @abstractmethod
    def save(self) -> None:
        """Finish the last page and write the document"""


class ReportLabSurface(DrawingSurface):
    """Surface backed by a reportlab.pdfgen Canvas"""

    def __init__(self, output_path: Union[str, Path], page_width: float, page_height: float,
                 title: str = "", author: str = ""):
        super().__init__(page_width, page_height)
        self.output_path = Path(output_path)
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(self.output_path), f"cannot create output directory: {e}") from e

        self._canvas = canvas.Canvas(
            str(self.output_path),
            pagesize=(mm_to_pt(page_width), mm_to_pt(page_height)),
        )
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)

    def place_text(self, text, x, y, font_name, font_size, color=black):
        if not text:
            return
        c = self._canvas
        c.setFont(font_name, font_size)
        c.setFillColor(color)
        c.drawString(mm_to_pt(x), mm_to_pt(y), text)

    def draw_line(self, x1, y1, x2, y2, thickness=1.0, color=black):
        c = self._canvas
        c.setStrokeColor(color)
        c.setLineWidth(thickness)
        c.line(mm_to_pt(x1), mm_to_pt(y1), mm_to_pt(x2), mm_to_pt(y2))

    def draw_rect(self, x, top, width, height, fill=None, stroke=None, thickness=1.0):
        if fill is None and stroke is None:
            return
        c = self._canvas
        if fill is not None:
            c.setFillColor(fill)
        if stroke is not None:
            c.setStrokeColor(stroke)
            c.setLineWidth(thickness)
        c.rect(
            mm_to_pt(x), mm_to_pt(top - height), mm_to_pt(width), mm_to_pt(height),
            stroke=1 if stroke is not None else 0,
            fill=1 if fill is not None else 0,
        )

    def draw_image(self, image, x, y, width, height):
        self._canvas.drawImage(
            ImageReader(image),
            mm_to_pt(x), mm_to_pt(y),
            width=mm_to_pt(width), height=mm_to_pt(height),
            mask='auto',
        )

    def _finish_page(self):
        self._canvas.showPage()

    def save(self):
        try:
            self._canvas.save()
        except OSError as e:
            raise OutputError(str(self.output_path), str(e)) from e
        logger.debug(f"Wrote {self.page_number} page(s) to {self.output_path}")


@dataclass(frozen=True)
class DrawOp:
    """One recorded drawing call"""
    kind: str  # 'text' | 'line' | 'rect' | 'image'
    page: int
    x: float
    y: float
    x2: float = 0.0
    y2: float = 0.0
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    font_name: str = ""
    font_size: float = 0.0
    thickness: float = 0.0
    color: Optional[Tuple[float, float, float]] = None
    fill: Optional[Tuple[float, float, float]] = None


def _rgb(color: Optional[Color]) -> Optional[Tuple[float, float, float]]:
    return tuple(color.rgb()) if color is not None else None


class RecordingSurface(DrawingSurface):
    """In-memory surface: records every call instead of drawing"""

    def __init__(self, page_width: float = 210.0, page_height: float = 297.0):
        super().__init__(page_width, page_height)
        self.ops: List[DrawOp] = []
        self.saved = False

    def place_text(self, text, x, y, font_name, font_size, color=black):
        if not text:
            return
        self.ops.append(DrawOp('text', self.page_number, x, y, text=text, font_name=font_name,
                               font_size=font_size, color=_rgb(color)))

    def draw_line(self, x1, y1, x2, y2, thickness=1.0, color=black):
        self.ops.append(DrawOp('line', self.page_number, x1, y1, x2=x2, y2=y2,
                               thickness=thickness, color=_rgb(color)))

    def draw_rect(self, x, top, width, height, fill=None, stroke=None, thickness=1.0):
        self.ops.append(DrawOp('rect', self.page_number, x, top, width=width, height=height,
                               thickness=thickness if stroke is not None else 0.0,
                               color=_rgb(stroke), fill=_rgb(fill)))

    def draw_image(self, image, x, y, width, height):
        self.ops.append(DrawOp('image', self.page_number, x, y, width=width, height=height))

    def _finish_page(self):
        pass

    def save(self):
        self.saved = True

    @property
    def page_count(self) -> int:
        return self.page_number

    def texts(self, page: Optional[int] = None) -> List[str]:
        """Text runs in drawing order, optionally for one page"""
        return [op.text for op in self.ops
                if op.kind == 'text' and (page is None or op.page == page)]

    def ops_of(self, kind: str, page: Optional[int] = None) -> List[DrawOp]:
        return [op for op in self.ops
                if op.kind == kind and (page is None or op.page == page)]
