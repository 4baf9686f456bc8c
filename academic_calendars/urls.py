from django.urls import re_path

from academic_calendars.views import CalendarListView, UniversityListView

urlpatterns = [
    re_path(r"^universities/?$", UniversityListView.as_view(), name="calendars-universities"),
    re_path(r"^calendars/?$", CalendarListView.as_view(), name="calendars-list"),
]
