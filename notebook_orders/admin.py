"""
Notebook Orders — Django Admin Registrations

========= CHANGE LOG =========
2026-02-01 • Register NotebookOwner / NotebookOrder (read-mostly; status changes go through the pipeline).
2026-02-09 • Add "Fail selected (timed out)" action for stuck generations.
"""
from django.contrib import admin, messages

from .models import NotebookOrder, NotebookOwner, Status
from .state import GENERATION_TIMED_OUT, fail_generation

STATUS_FIELDS = (
    "status",
    "status_updated_at",
    "error_message",
    "download_url",
    "download_expires_at",
    "download_path",
    "download_updated_at",
    "last_event_id",
)


class NotebookOrderInline(admin.TabularInline):
    model = NotebookOrder
    extra = 0
    fields = ("session_id", "status", "fiscal_year", "calendar_id", "created_at")
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(NotebookOwner)
class NotebookOwnerAdmin(admin.ModelAdmin):
    list_display = ("user_id", "status", "session_id", "fiscal_year", "calendar_id", "updated_at")
    list_filter = ("status",)
    search_fields = ("user_id", "session_id", "buyer_email")
    readonly_fields = STATUS_FIELDS + ("processed_event_ids", "created_at", "updated_at")
    inlines = [NotebookOrderInline]


@admin.register(NotebookOrder)
class NotebookOrderAdmin(admin.ModelAdmin):
    list_display = ("session_id", "owner", "status", "fiscal_year", "calendar_id", "university_code", "status_updated_at")
    list_filter = ("status", "fiscal_year")
    search_fields = ("session_id", "owner__user_id", "buyer_email", "calendar_id")
    readonly_fields = STATUS_FIELDS + ("created_at", "updated_at")
    ordering = ("-created_at",)
    actions = ["fail_stuck"]

    @admin.action(description="Fail selected generating orders (timed out)")
    def fail_stuck(self, request, queryset):
        failed = 0
        for session_id in queryset.filter(status=Status.GENERATING_ARTIFACT).values_list("session_id", flat=True):
            if fail_generation(session_id, GENERATION_TIMED_OUT):
                failed += 1
        self.message_user(request, f"{failed} order(s) marked failed.", level=messages.INFO)
