from django.urls import path

from .views import (
    AdminDecisionView,
    AdminOnboardView,
    ApplyView,
    CompletedDashboardView,
    EnrollmentView,
    FreshDashboardView,
    InternDetailView,
    InternProfileView,
    OngoingDashboardView,
    PendingDashboardView,
    RejectedDashboardView,
)

urlpatterns = [
    # ======================
    # PUBLIC / CAPABILITY LINK
    # ======================
    path("apply", ApplyView.as_view(), name="apply"),
    path("enroll/<str:intern_id>", EnrollmentView.as_view(), name="enroll"),

    # ======================
    # ADMIN
    # ======================
    path("admin/decision", AdminDecisionView.as_view(), name="admin-decision"),
    path("admin/onboard", AdminOnboardView.as_view(), name="admin-onboard"),
    path("admin/dashboard/fresh", FreshDashboardView.as_view(), name="dashboard-fresh"),
    path("admin/dashboard/pending", PendingDashboardView.as_view(), name="dashboard-pending"),
    path("admin/dashboard/ongoing", OngoingDashboardView.as_view(), name="dashboard-ongoing"),
    path("admin/dashboard/rejected", RejectedDashboardView.as_view(), name="dashboard-rejected"),
    path("admin/dashboard/completed", CompletedDashboardView.as_view(), name="dashboard-completed"),
    path("admin/intern/<str:intern_id>", InternDetailView.as_view(), name="admin-intern-detail"),

    # ======================
    # INTERN
    # ======================
    path("intern/profile", InternProfileView.as_view(), name="intern-profile"),
]
