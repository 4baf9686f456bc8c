from .directory import UniversitySerializer, CalendarSerializer

__all__ = ["UniversitySerializer", "CalendarSerializer"]
