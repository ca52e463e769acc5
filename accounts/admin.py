from django.contrib import admin
from django.contrib.admin.sites import NotRegistered
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.contrib.auth.models import Group

from .models import AuditLog, LoginHistory, PasswordResetToken, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("username", "full_name", "email", "is_active", "last_login")
    search_fields = ("username", "full_name", "email")
    ordering = ("username",)

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Profile", {"fields": ("full_name", "email")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "full_name", "email", "password1", "password2"),
            },
        ),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor_type", "actor_id", "action", "category", "level", "object_type", "object_id")
    list_filter = ("level", "category", "created_at")
    search_fields = ("action", "object_type", "object_id", "actor_id")
    readonly_fields = (
        "actor_type",
        "actor_id",
        "action",
        "category",
        "level",
        "object_type",
        "object_id",
        "ip_address",
        "metadata",
        "created_at",
    )

    def has_module_permission(self, request):
        return bool(request.user.is_authenticated and request.user.is_superuser)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(LoginHistory)
class LoginHistoryAdmin(admin.ModelAdmin):
    list_display = ("created_at", "user_type", "identifier", "ip_address", "success")
    list_filter = ("success", "user_type", "created_at")
    search_fields = ("identifier", "ip_address", "user_agent")
    readonly_fields = ("user_type", "identifier", "ip_address", "user_agent", "success", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("email", "user_type", "created_at", "expires_at", "is_used")
    list_filter = ("user_type", "is_used")
    search_fields = ("email",)
    exclude = ("token",)
    readonly_fields = ("email", "user_type", "created_at", "expires_at", "is_used")

    def has_add_permission(self, request):
        return False


try:
    admin.site.unregister(Group)
except NotRegistered:
    pass
