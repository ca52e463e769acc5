from django.urls import path

from .views import MyReportListView, SubmitDailyReportView

urlpatterns = [
    path("intern/reports", MyReportListView.as_view(), name="intern-reports"),
    path("intern/report", SubmitDailyReportView.as_view(), name="intern-report-submit"),
]
