from rest_framework import serializers

from common.fields import CleanTextField

from .models import DailyReport


class DailyReportSerializer(serializers.ModelSerializer):
    workDescription = serializers.CharField(source="work_description", read_only=True)
    toolsUsed = serializers.CharField(source="tools_used", read_only=True)
    issuesFaced = serializers.CharField(source="issues_faced", read_only=True)
    reportDate = serializers.DateField(source="report_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = DailyReport
        fields = (
            "id",
            "domain",
            "workDescription",
            "toolsUsed",
            "issuesFaced",
            "reportDate",
            "createdAt",
        )
        read_only_fields = fields


class MyDailyReportSerializer(DailyReportSerializer):
    """Intern's own list also echoes who filed the report."""

    applicationNo = serializers.CharField(source="intern.application_no", read_only=True)
    name = serializers.CharField(source="intern.full_name", read_only=True)

    class Meta(DailyReportSerializer.Meta):
        fields = (
            "id",
            "domain",
            "applicationNo",
            "name",
            "workDescription",
            "toolsUsed",
            "issuesFaced",
            "reportDate",
            "createdAt",
        )
        read_only_fields = fields


class DailyReportCreateSerializer(serializers.Serializer):
    domain = CleanTextField(max_length=200, message="Domain is required")
    workDescription = CleanTextField(
        source="work_description", max_length=5000, message="Work description is required"
    )
    toolsUsed = CleanTextField(source="tools_used", max_length=2000, required=False)
    issuesFaced = CleanTextField(source="issues_faced", max_length=2000, required=False)
