"""
notebook_orders.services.renderer

Lays a fiscal year of described days out as an A5 refill notebook:

  page 1      cover (watermarked with the buyer's email, or "Buyer")
  page 2..N   one page per Monday-first week

Pages are printed double-sided, so the binding edge alternates: odd pages keep the
inner (binding) margin on the left, even pages on the right. Top and bottom margins
are fixed. Margins live on each page block rather than in @page rules, since
xhtml2pdf does not support :left / :right page selectors.

========= CHANGE LOG =========
2026-02-03 • ADD: NotebookRenderer (cover + weekly pages, alternating margins).
2026-02-07 • ADD: optional NOTEBOOK_PDF_FONT_PATH @font-face for Japanese glyphs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from django.conf import settings
from django.template.loader import render_to_string

from academic_calendars.services.descriptions import NotebookDay
from academic_calendars.services.fiscal_year import partition_weeks
from notebook_orders.exceptions import GenerationFailed

from .pdf_service import render_pdf_from_html

log = logging.getLogger("refillstore")

INNER_MARGIN_MM = 10
OUTER_MARGIN_MM = 20
VERTICAL_MARGIN_MM = 10

DEFAULT_WATERMARK = "Buyer"

WEEKDAY_SHORT_JA = ("月", "火", "水", "木", "金", "土", "日")


@dataclass(frozen=True)
class NotebookPage:
    number: int
    kind: str  # "cover" | "week"
    days: Tuple[NotebookDay, ...] = ()

    @property
    def is_odd(self) -> bool:
        return self.number % 2 == 1

    @property
    def margin_left_mm(self) -> int:
        return INNER_MARGIN_MM if self.is_odd else OUTER_MARGIN_MM

    @property
    def margin_right_mm(self) -> int:
        return OUTER_MARGIN_MM if self.is_odd else INNER_MARGIN_MM

    @property
    def week_start(self) -> Optional[date]:
        return self.days[0].date if self.days else None

    def rows(self) -> List[dict]:
        return [
            {
                "date": d.date,
                "label": f"{d.date.month}/{d.date.day}",
                "weekday": WEEKDAY_SHORT_JA[d.date.weekday()],
                "is_holiday": d.is_holiday or d.date.weekday() == 6 or bool(d.description_a),
                "description_a": d.description_a,
                "description_b": d.description_b,
            }
            for d in self.days
        ]


@dataclass(frozen=True)
class RenderedNotebook:
    pdf: bytes
    page_count: int
    engine: str


class NotebookRenderer:
    template_name = "notebook_orders/notebook.html"

    def __init__(self, engine: Optional[str] = None, font_path: Optional[str] = None, template_name: Optional[str] = None):
        self.engine = engine
        self.font_path = (font_path or "").strip()
        if template_name:
            self.template_name = template_name

    @classmethod
    def from_settings(cls) -> "NotebookRenderer":
        return cls(
            engine=getattr(settings, "NOTEBOOK_PDF_ENGINE", None),
            font_path=getattr(settings, "NOTEBOOK_PDF_FONT_PATH", ""),
        )

    def build_pages(self, days: Sequence[NotebookDay]) -> List[NotebookPage]:
        if len(days) % 7 != 0:
            raise GenerationFailed(f"Day list must be whole weeks, got {len(days)} days")

        pages = [NotebookPage(number=1, kind="cover")]
        for i, week in enumerate(partition_weeks(days), start=2):
            pages.append(NotebookPage(number=i, kind="week", days=tuple(week)))
        return pages

    def render_html(
        self,
        days: Sequence[NotebookDay],
        *,
        watermark: Optional[str] = None,
        fiscal_year: str = "",
        calendar_id: str = "",
    ) -> Tuple[str, List[NotebookPage]]:
        pages = self.build_pages(days)
        html = render_to_string(
            self.template_name,
            {
                "pages": pages,
                "watermark": (watermark or "").strip() or DEFAULT_WATERMARK,
                "fiscal_year": fiscal_year,
                "calendar_id": calendar_id,
                "font_path": self.font_path,
                "vertical_margin_mm": VERTICAL_MARGIN_MM,
            },
        )
        return html, pages

    def render(
        self,
        days: Sequence[NotebookDay],
        *,
        watermark: Optional[str] = None,
        fiscal_year: str = "",
        calendar_id: str = "",
    ) -> RenderedNotebook:
        html, pages = self.render_html(days, watermark=watermark, fiscal_year=fiscal_year, calendar_id=calendar_id)
        pdf, engine_used = render_pdf_from_html(html, engine=self.engine)
        log.info(
            "[renderer] fiscal_year=%s calendar=%s pages=%s engine=%s bytes=%s",
            fiscal_year,
            calendar_id,
            len(pages),
            engine_used,
            len(pdf),
        )
        return RenderedNotebook(pdf=pdf, page_count=len(pages), engine=engine_used)
