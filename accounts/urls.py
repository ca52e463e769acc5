from django.urls import path

from .views import (
    ChangePasswordView,
    LoginView,
    LogoutView,
    PasswordResetConfirmView,
    PasswordResetRequestView,
    PasswordResetVerifyView,
)

urlpatterns = [
    # AUTH
    path("login", LoginView.as_view(), name="login"),
    path("logout", LogoutView.as_view(), name="logout"),

    # PASSWORD
    path("change-password", ChangePasswordView.as_view(), name="change-password"),
    path("request-password-reset", PasswordResetRequestView.as_view(), name="password-reset-request"),
    path("verify-reset-token/<str:token>", PasswordResetVerifyView.as_view(), name="password-reset-verify"),
    path("reset-password/<str:token>", PasswordResetConfirmView.as_view(), name="password-reset-confirm"),
]
