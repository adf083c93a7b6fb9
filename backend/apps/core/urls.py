from django.urls import path

from .views import (
    PrincipalCreatedHookView,
    MeView,
    DirectoryView,
    PublicProfileView,
    HealthzView,
    ReadinessView,
    MetricsView,
)

urlpatterns = [
    path("auth/hooks/principal-created", PrincipalCreatedHookView.as_view()),
    path("users", DirectoryView.as_view()),
    path("users/me", MeView.as_view()),
    path("users/<int:id>", PublicProfileView.as_view()),
    # Observability
    path("healthz", HealthzView.as_view()),
    path("readiness", ReadinessView.as_view()),
    path("metrics", MetricsView.as_view()),
]
