from rest_framework import serializers

from academic_calendars.models import Calendar, University


class UniversitySerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="code", read_only=True)

    class Meta:
        model = University
        fields = ["id", "name", "furigana", "code"]


class CalendarSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="calendar_id", read_only=True)
    calendarId = serializers.CharField(source="calendar_id", read_only=True)
    fiscalYear = serializers.CharField(source="fiscal_year", read_only=True)
    universityCode = serializers.CharField(source="university_code", read_only=True)

    class Meta:
        model = Calendar
        fields = ["id", "name", "calendarId", "fiscalYear", "universityCode"]
