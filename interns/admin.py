from django.contrib import admin

from reports.models import DailyReport

from .models import Intern


class DailyReportInline(admin.TabularInline):
    model = DailyReport
    extra = 0
    fields = ("report_date", "domain", "work_description")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Intern)
class InternAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "full_name",
        "application_no",
        "personal_email",
        "status",
        "date_of_joining",
        "date_of_leaving",
        "created_at",
    )
    list_filter = ("status", "gender")
    search_fields = ("full_name", "personal_email", "enrollment_no", "application_no")
    ordering = ("-created_at",)
    inlines = [DailyReportInline]
    # Status moves only through the API so the lifecycle rules hold.
    readonly_fields = ("status", "created_at", "updated_at")
    exclude = ("password",)
