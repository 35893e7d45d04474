"""
Table layout.

Pass 1 (TableLayout.compute) is pure measurement: column count, column
width and one height per row. Pass 2 (draw_table) paints the measured
table. Keeping them apart lets the row heights be checked without a surface.
"""

from dataclasses import dataclass
from typing import List, Tuple

from pagesetter.document.models import TableData

from .inline_runs import strip_markers
from .text_metrics import calculate_line_height, wrap_text


CELL_PADDING = 4.0
MIN_ROW_HEIGHT = 15.0
BORDER_THICKNESS = 0.8
BASELINE_DROP = 0.8  # first baseline sits this many line heights below the text top


def wrap_cell(text: str, column_width: float, font_size: float) -> List[str]:
    return wrap_text(strip_markers(text), column_width - CELL_PADDING * 2, font_size)


@dataclass(frozen=True)
class TableLayout:
    """Measured table: header row first when present"""
    column_count: int
    column_width: float
    row_heights: Tuple[float, ...]
    has_header: bool
    line_height: float

    @property
    def total_height(self) -> float:
        return sum(self.row_heights)

    @classmethod
    def compute(cls, table_data: TableData, max_width: float, font_size: float) -> 'TableLayout':
        column_count = table_data.column_count
        line_height = calculate_line_height(font_size)
        if column_count == 0:
            return cls(0, 0.0, (), False, line_height)

        column_width = max_width / column_count
        rows = []
        if table_data.has_header:
            rows.append(table_data.headers)
        rows.extend(table_data.padded_row(i) for i in range(len(table_data.rows)))

        heights = []
        for row in rows:
            max_lines = max([1] + [len(wrap_cell(cell, column_width, font_size)) for cell in row])
            heights.append(max(line_height * max_lines + CELL_PADDING * 2, MIN_ROW_HEIGHT))

        return cls(column_count, column_width, tuple(heights), table_data.has_header, line_height)


def draw_table(surface, table_data: TableData, layout: TableLayout, x: float, y: float,
               max_width: float, fonts, font_size: float, colors) -> float:
    """
    Draw a measured table with its top-left corner at (x, y).

    Returns:
        Total table height (sum of the row heights)
    """
    line_height = layout.line_height
    column_width = layout.column_width
    current_y = y
    row_index = 0

    if layout.has_header:
        header_height = layout.row_heights[0]
        surface.draw_rect(x, current_y, max_width, header_height, fill=colors.table_header)

        headers = table_data.headers + ("",) * (layout.column_count - len(table_data.headers))
        for i, header in enumerate(headers):
            cell_x = x + column_width * i
            if i > 0:
                surface.draw_line(cell_x, current_y, cell_x, current_y - header_height,
                                  BORDER_THICKNESS, colors.table_border)

            text_y = current_y - CELL_PADDING - line_height * BASELINE_DROP
            for line in wrap_cell(header, column_width, font_size):
                surface.place_text(line, cell_x + CELL_PADDING, text_y, fonts.bold, font_size,
                                   colors.table_header_text)
                text_y -= line_height

        current_y -= header_height
        row_index += 1
        surface.draw_line(x, current_y, x + max_width, current_y, BORDER_THICKNESS * 2,
                          colors.table_border)

    for body_index in range(len(table_data.rows)):
        row_height = layout.row_heights[row_index]
        if body_index % 2 == 1:
            surface.draw_rect(x, current_y, max_width, row_height, fill=colors.table_stripe)

        for i, cell in enumerate(table_data.padded_row(body_index)):
            cell_x = x + column_width * i
            if i > 0:
                surface.draw_line(cell_x, current_y, cell_x, current_y - row_height,
                                  BORDER_THICKNESS * 0.7, colors.table_divider)

            lines = wrap_cell(cell, column_width, font_size)
            vertical_offset = (row_height - line_height * len(lines)) / 2
            text_y = current_y - vertical_offset - line_height * BASELINE_DROP
            for line in lines:
                surface.place_text(line, cell_x + CELL_PADDING, text_y, fonts.regular, font_size,
                                   colors.text)
                text_y -= line_height

        current_y -= row_height
        row_index += 1
        surface.draw_line(x, current_y, x + max_width, current_y, BORDER_THICKNESS * 0.5,
                          colors.table_row_rule)

    # Outer border last so the header fill and stripes don't cover it
    surface.draw_rect(x, y, max_width, layout.total_height, stroke=colors.table_border,
                      thickness=BORDER_THICKNESS * 1.5)

    return layout.total_height
