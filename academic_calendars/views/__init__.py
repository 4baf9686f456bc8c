from .directory_view import CalendarListView, UniversityListView

__all__ = ["CalendarListView", "UniversityListView"]
