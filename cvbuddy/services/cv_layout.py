"""
Layout planner for rendering optimized CV text onto A4 pages.

Pure function of the input text: decides which lines are kept, which are
section headers, where each wrapped fragment lands, and where pages break.
Drawing is left to the renderer adapter.
"""

from typing import Callable

from cvbuddy.domain.models import LayoutPage, PositionedLine

# All measurements in millimetres, top-left origin.
LEFT_MARGIN = 20.0
TOP_MARGIN = 20.0
LINE_HEIGHT = 7.0
TEXT_WIDTH = 170.0
PAGE_BREAK_Y = 280.0

FONT_NAME = "Helvetica"
FONT_SIZE = 12

_SKIPPED_RULES = {"---"}


def is_skipped(stripped: str) -> bool:
    """Blank lines, horizontal rules and markdown bold markers are dropped."""
    return not stripped or stripped in _SKIPPED_RULES or stripped.startswith("**")


def is_section_header(stripped: str) -> bool:
    """ALL-CAPS lines and lines ending in a colon start a new section."""
    if stripped.endswith(":"):
        return True
    return any(c.isalpha() for c in stripped) and stripped.upper() == stripped


def _break_long_fragment(fragment: str, max_width: float) -> list[str]:
    """Split a fragment with no usable spaces (e.g. a URL) character by character."""
    from reportlab.pdfbase.pdfmetrics import stringWidth

    pieces: list[str] = []
    current = ""
    for char in fragment:
        if current and stringWidth(current + char, FONT_NAME, FONT_SIZE) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    pieces.append(current)
    return pieces


def reportlab_wrap(text: str) -> list[str]:
    """Wrap a line to the text width using Helvetica metrics."""
    from reportlab.lib.units import mm
    from reportlab.lib.utils import simpleSplit
    from reportlab.pdfbase.pdfmetrics import stringWidth

    max_width = TEXT_WIDTH * mm
    fragments: list[str] = []
    for fragment in simpleSplit(text, FONT_NAME, FONT_SIZE, max_width) or [text]:
        # simpleSplit only breaks at spaces
        if stringWidth(fragment, FONT_NAME, FONT_SIZE) > max_width:
            fragments.extend(_break_long_fragment(fragment, max_width))
        else:
            fragments.append(fragment)
    return fragments


def plan_layout(
    cv_text: str,
    wrap: Callable[[str], list[str]] = reportlab_wrap,
) -> list[LayoutPage]:
    """Split CV text into positioned lines across one or more pages."""

    pages = [LayoutPage()]
    y = TOP_MARGIN

    for raw_line in cv_text.splitlines():
        stripped = raw_line.strip()
        if is_skipped(stripped):
            continue

        header = is_section_header(stripped)
        if header:
            y += LINE_HEIGHT * 2

        for fragment in wrap(raw_line.rstrip()):
            if y > PAGE_BREAK_Y:
                pages.append(LayoutPage())
                y = TOP_MARGIN
            pages[-1].lines.append(
                PositionedLine(text=fragment, x=LEFT_MARGIN, y=y, is_header=header)
            )
            y += LINE_HEIGHT

        if header:
            y += LINE_HEIGHT

    return pages
