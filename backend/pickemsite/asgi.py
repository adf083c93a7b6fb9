import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pickemsite.settings")

django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from django.urls import path  # noqa: E402

from apps.pickem.consumers import LeaderboardConsumer, VoteStatsConsumer  # noqa: E402

# Websocket routing
websocket_urlpatterns = [
    path("ws/contests/<uuid:id>/leaderboard", LeaderboardConsumer.as_asgi()),
    path("ws/matches/<uuid:id>/votes", VoteStatsConsumer.as_asgi()),
]

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": URLRouter(websocket_urlpatterns),
    }
)
