"""
CHANGE LOG
- 2026-02-08 • /api/universities/ and /api/calendars/ shapes, filters and ordering.
"""

from __future__ import annotations

from django.test import Client, TestCase

from academic_calendars.models import Calendar, University


class UniversityListTests(TestCase):
    def setUp(self):
        self.client = Client()
        University.objects.create(code="U002", name="東北大学", furigana="とうほくだいがく")
        University.objects.create(code="U001", name="北海道大学", furigana="ほっかいどうだいがく")
        University.objects.create(code="U003", name="")

    def test_named_universities_ordered_by_name(self):
        r = self.client.get("/api/universities/")
        self.assertEqual(r.status_code, 200)
        rows = r.json()["universities"]
        # 北 (U+5317) sorts before 東 (U+6771)
        self.assertEqual([u["code"] for u in rows], ["U001", "U002"])
        self.assertEqual(set(rows[0].keys()), {"id", "name", "furigana", "code"})
        self.assertEqual(rows[0]["id"], rows[0]["code"])

    def test_no_trailing_slash(self):
        self.assertEqual(self.client.get("/api/universities").status_code, 200)


class CalendarListTests(TestCase):
    def setUp(self):
        self.client = Client()
        Calendar.objects.create(fiscal_year="2025", calendar_id="b", university_code="U001", name="大学院", order=2)
        Calendar.objects.create(fiscal_year="2025", calendar_id="a", university_code="U001", name="学部", order=1)
        Calendar.objects.create(fiscal_year="2025", calendar_id="hidden", university_code="U001", name="非公開", is_publishable=False)
        Calendar.objects.create(fiscal_year="2025", calendar_id="noname", university_code="U001", name="")
        Calendar.objects.create(fiscal_year="2024", calendar_id="old", university_code="U001", name="旧")
        Calendar.objects.create(fiscal_year="2025", calendar_id="other", university_code="U002", name="他大学")

    def test_requires_year_and_university(self):
        for qs in ("", "?year=2025", "?universityCode=U001"):
            with self.subTest(qs=qs):
                r = self.client.get(f"/api/calendars/{qs}")
                self.assertEqual(r.status_code, 400)
                self.assertEqual(r.json(), {"error": "year and universityCode are required"})

    def test_publishable_named_calendars_in_order(self):
        r = self.client.get("/api/calendars/", {"year": "2025", "universityCode": "U001"})
        self.assertEqual(r.status_code, 200)
        rows = r.json()["calendars"]
        self.assertEqual([c["calendarId"] for c in rows], ["a", "b"])
        self.assertEqual(
            rows[0],
            {"id": "a", "name": "学部", "calendarId": "a", "fiscalYear": "2025", "universityCode": "U001"},
        )
