import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from academic_calendars.models import Calendar, University
from academic_calendars.serializers import CalendarSerializer, UniversitySerializer

logger = logging.getLogger("refillstore")


class UniversityListView(APIView):
    """
    GET /api/universities/
    Universities that have both a name and a code, ordered by name.
    """
    def get(self, request, *args, **kwargs):
        universities = University.objects.exclude(name="").exclude(code="").order_by("name")
        data = UniversitySerializer(universities, many=True).data
        return Response({"universities": data}, status=status.HTTP_200_OK)


class CalendarListView(APIView):
    """
    GET /api/calendars/?year=2025&universityCode=U001
    Publishable, named calendars for one university and fiscal year, ordered for display.
    """
    def get(self, request, *args, **kwargs):
        fiscal_year = (request.GET.get("year") or "").strip()
        university_code = (request.GET.get("universityCode") or "").strip()

        if not fiscal_year or not university_code:
            return Response(
                {"error": "year and universityCode are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        calendars = (
            Calendar.objects.filter(fiscal_year=fiscal_year, university_code=university_code, is_publishable=True)
            .exclude(name="")
            .order_by("order", "calendar_id")
        )
        logger.info(
            "[calendars] list fiscal_year=%s university=%s count=%s",
            fiscal_year,
            university_code,
            calendars.count(),
        )
        return Response({"calendars": CalendarSerializer(calendars, many=True).data}, status=status.HTTP_200_OK)
