"""
Academic Calendars — Django Admin Registrations
"""
from django.contrib import admin

from .models import Calendar, CalendarDay, CalendarMonth, CalendarTerm, University


@admin.register(University)
class UniversityAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "furigana")
    search_fields = ("code", "name", "furigana")
    ordering = ("name",)


class CalendarTermInline(admin.TabularInline):
    model = CalendarTerm
    extra = 0


@admin.register(Calendar)
class CalendarAdmin(admin.ModelAdmin):
    list_display = ("fiscal_year", "calendar_id", "university_code", "name", "is_publishable", "order")
    list_filter = ("fiscal_year", "is_publishable")
    search_fields = ("calendar_id", "university_code", "name")
    inlines = [CalendarTermInline]


@admin.register(CalendarDay)
class CalendarDayAdmin(admin.ModelAdmin):
    list_display = ("calendar", "date", "day_type", "class_weekday", "class_order", "term_id", "is_holiday", "is_deleted")
    list_filter = ("is_holiday", "is_deleted", "day_type")
    search_fields = ("calendar__calendar_id", "national_holiday_name")
    date_hierarchy = "date"


@admin.register(CalendarMonth)
class CalendarMonthAdmin(admin.ModelAdmin):
    list_display = ("calendar", "month_id", "updated_at")
    search_fields = ("calendar__calendar_id", "month_id")
