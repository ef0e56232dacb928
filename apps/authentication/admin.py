from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Account, Profile


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False


@admin.register(Account)
class AccountAdmin(BaseUserAdmin):
    list_display  = ("email", "display_name", "is_active", "is_staff", "created_at")
    list_filter   = ("is_active", "is_staff")
    search_fields = ("email", "display_name")
    ordering      = ("-created_at",)
    inlines       = [ProfileInline]
    fieldsets = (
        (None,          {"fields": ("email", "password")}),
        ("Personal",    {"fields": ("display_name",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2")}),
    )


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display  = ("account", "name", "role", "created_at")
    list_filter   = ("role",)
    search_fields = ("name", "account__email")
