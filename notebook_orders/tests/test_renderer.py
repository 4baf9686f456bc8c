"""
CHANGE LOG
- 2026-02-03 • Page layout: cover + one page per week, alternating binding margins.
- 2026-02-07 • Engine chain ordering + aggregated failure when no engine is usable.
"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from unittest import mock

from django.test import SimpleTestCase, override_settings

from academic_calendars.services.descriptions import NotebookDay
from notebook_orders.exceptions import GenerationFailed
from notebook_orders.services import pdf_service
from notebook_orders.services.renderer import (
    INNER_MARGIN_MM,
    OUTER_MARGIN_MM,
    NotebookRenderer,
)


def _days(n: int, start: date = date(2025, 3, 31)):
    out = []
    for i in range(n):
        d = start + timedelta(days=i)
        holiday = "昭和の日" if d == date(2025, 4, 29) else ""
        out.append(NotebookDay(date=d, is_holiday=bool(holiday), description_a=holiday, description_b="前期"))
    return out


class BuildPagesTests(SimpleTestCase):
    def test_page_count_is_weeks_plus_cover(self):
        renderer = NotebookRenderer()
        for weeks in (1, 2, 53):
            with self.subTest(weeks=weeks):
                pages = renderer.build_pages(_days(weeks * 7))
                self.assertEqual(len(pages), weeks + 1)
                self.assertEqual(pages[0].kind, "cover")
                self.assertTrue(all(p.kind == "week" and len(p.days) == 7 for p in pages[1:]))

    def test_margins_alternate_by_page_number(self):
        pages = NotebookRenderer().build_pages(_days(21))
        odd, even = pages[0], pages[1]
        self.assertEqual((odd.margin_left_mm, odd.margin_right_mm), (INNER_MARGIN_MM, OUTER_MARGIN_MM))
        self.assertEqual((even.margin_left_mm, even.margin_right_mm), (OUTER_MARGIN_MM, INNER_MARGIN_MM))
        self.assertEqual(pages[2].margin_left_mm, INNER_MARGIN_MM)

    def test_partial_week_rejected(self):
        with self.assertRaises(GenerationFailed):
            NotebookRenderer().build_pages(_days(10))

    def test_weeks_start_on_monday(self):
        pages = NotebookRenderer().build_pages(_days(14))
        self.assertEqual(pages[1].week_start, date(2025, 3, 31))
        self.assertEqual(pages[2].week_start, date(2025, 4, 7))


class RenderHtmlTests(SimpleTestCase):
    def test_watermark_and_descriptions(self):
        html, pages = NotebookRenderer().render_html(
            _days(35), watermark="buyer@example.com", fiscal_year="2025", calendar_id="cal-a"
        )
        self.assertEqual(len(pages), 6)
        self.assertIn("buyer@example.com", html)
        self.assertIn("昭和の日", html)
        self.assertIn("2025年度", html)
        self.assertEqual(html.count('class="page '), 6)
        self.assertIn("padding-left: 10mm; padding-right: 20mm;", html)
        self.assertIn("padding-left: 20mm; padding-right: 10mm;", html)

    def test_default_watermark(self):
        html, _ = NotebookRenderer().render_html(_days(7), watermark=None)
        self.assertIn("Buyer", html)

    def test_font_face_only_when_configured(self):
        html, _ = NotebookRenderer().render_html(_days(7))
        self.assertNotIn("@font-face", html)
        html, _ = NotebookRenderer(font_path="/fonts/NotoSansJP.ttf").render_html(_days(7))
        self.assertIn("/fonts/NotoSansJP.ttf", html)

    def test_render_returns_pdf_and_page_count(self):
        with mock.patch(
            "notebook_orders.services.renderer.render_pdf_from_html", return_value=(b"%PDF-1.4", "xhtml2pdf")
        ) as fake:
            rendered = NotebookRenderer(engine="xhtml2pdf").render(_days(14), watermark="a@b.c")
        self.assertEqual(rendered.page_count, 3)
        self.assertEqual(rendered.pdf, b"%PDF-1.4")
        self.assertEqual(fake.call_args.kwargs["engine"], "xhtml2pdf")


class PdfServiceTests(SimpleTestCase):
    def test_engine_chain_puts_preferred_first(self):
        self.assertEqual(pdf_service.engine_chain("weasyprint"), ["weasyprint", "xhtml2pdf", "pdfkit"])
        self.assertEqual(pdf_service.engine_chain("pdfkit"), ["pdfkit", "xhtml2pdf", "weasyprint"])

    @override_settings(NOTEBOOK_PDF_ENGINE="bogus")
    def test_unknown_engine_uses_default_chain(self):
        self.assertEqual(pdf_service.engine_chain(), ["xhtml2pdf", "weasyprint", "pdfkit"])

    def test_all_engines_unavailable(self):
        with mock.patch.dict(sys.modules, {"xhtml2pdf": None, "weasyprint": None, "pdfkit": None}):
            with self.assertRaises(GenerationFailed) as ctx:
                pdf_service.render_pdf_from_html("<html></html>")
        for eng in ("xhtml2pdf", "weasyprint", "pdfkit"):
            self.assertIn(eng, str(ctx.exception))

    def test_sanitize(self):
        self.assertEqual(pdf_service._sanitize("a\u2014b\u00a0c"), "a-b c")
