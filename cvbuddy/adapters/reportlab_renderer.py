"""
Concrete implementation of RenderPort using reportlab's canvas API.
"""

import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from cvbuddy.ports.render_port import RenderPort
from cvbuddy.services.cv_layout import FONT_NAME, FONT_SIZE, plan_layout

logger = logging.getLogger(__name__)


class ReportLabRenderer(RenderPort):
    """Draws the planned layout onto A4 pages."""

    def render(self, cv_text: str) -> bytes:
        pages = plan_layout(cv_text)
        _, page_height = A4

        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        c.setTitle("Optimized CV")

        for index, page in enumerate(pages):
            if index:
                c.showPage()
            c.setFont(FONT_NAME, FONT_SIZE)
            for line in page.lines:
                # Layout is top-down in mm; reportlab is bottom-up in points
                c.drawString(line.x * mm, page_height - line.y * mm, line.text)

        c.save()
        logger.info(f"Rendered optimized CV: {len(pages)} page(s)")
        return buffer.getvalue()
