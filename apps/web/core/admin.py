"""Admin registrations for core models."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):  # type: ignore[type-arg]
    list_display = ["username", "name", "is_admin", "is_staff", "is_active"]
    list_filter = ["is_admin", "is_staff", "is_active"]
    search_fields = ["username", "name"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,  # type: ignore[misc]
        ("Restaurant", {"fields": ("name", "is_admin")}),
    )
    add_fieldsets = (
        *BaseUserAdmin.add_fieldsets,
        ("Restaurant", {"fields": ("name", "is_admin")}),
    )
