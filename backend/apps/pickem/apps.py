from django.apps import AppConfig


class PickemConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.pickem"

    def ready(self):
        # Register signals for vote/leaderboard broadcasting
        from . import signals  # noqa: F401
