from django.contrib import admin

from .models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    """Read-only: profiles are provisioned by the hook and edited only by their owner."""

    list_display = ("user_id", "handle", "display_name", "provider_id", "created_at")
    search_fields = ("handle", "display_name", "provider_id")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        # Profiles go away only with their auth user
        return False
