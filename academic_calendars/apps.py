from django.apps import AppConfig


class AcademicCalendarsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "academic_calendars"
    verbose_name = "Academic Calendars"  # Admin section name
