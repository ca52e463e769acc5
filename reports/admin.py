from django.contrib import admin

from .models import DailyReport


@admin.register(DailyReport)
class DailyReportAdmin(admin.ModelAdmin):
    list_display = ("id", "intern", "domain", "report_date", "created_at")
    list_filter = ("report_date",)
    search_fields = ("intern__full_name", "intern__application_no", "domain")
    date_hierarchy = "report_date"
    readonly_fields = (
        "intern",
        "domain",
        "work_description",
        "tools_used",
        "issues_faced",
        "report_date",
        "created_at",
    )

    def has_add_permission(self, request):
        return False
