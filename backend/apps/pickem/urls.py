from django.urls import path

from .views import (
    ContestListView,
    ContestDetailView,
    TeamListView,
    MatchListView,
    MatchDetailView,
    MatchLockView,
    MatchVotesView,
    MatchVoteStatsView,
    MyVoteView,
    ContestLeaderboardView,
    ContestPointsView,
    ContestStarsView,
    AdminContestListCreateView,
    AdminContestDetailView,
    AdminContestRecomputeView,
    AdminSubContestListCreateView,
    AdminSubContestDetailView,
    AdminTeamListCreateView,
    AdminTeamDetailView,
    AdminMatchListCreateView,
    AdminMatchDetailView,
    AdminBreakdownView,
    AdminRecomputeView,
    AdminStarCreateView,
)

urlpatterns = [
    path("contests", ContestListView.as_view()),
    path("contests/<uuid:id>", ContestDetailView.as_view()),
    path("contests/<uuid:id>/leaderboard", ContestLeaderboardView.as_view()),
    path("contests/<uuid:id>/points/<int:user_id>", ContestPointsView.as_view()),
    path("contests/<uuid:id>/stars", ContestStarsView.as_view()),
    path("teams", TeamListView.as_view()),
    path("matches", MatchListView.as_view()),
    path("matches/<uuid:id>", MatchDetailView.as_view()),
    path("matches/<uuid:id>/lock", MatchLockView.as_view()),
    path("matches/<uuid:id>/votes", MatchVotesView.as_view()),
    path("matches/<uuid:id>/votes/stats", MatchVoteStatsView.as_view()),
    path("matches/<uuid:id>/vote", MyVoteView.as_view()),
    # Admin (ingestion)
    path("admin/contests", AdminContestListCreateView.as_view()),
    path("admin/contests/<uuid:id>", AdminContestDetailView.as_view()),
    path("admin/contests/<uuid:id>/recompute", AdminContestRecomputeView.as_view()),
    path("admin/sub-contests", AdminSubContestListCreateView.as_view()),
    path("admin/sub-contests/<uuid:id>", AdminSubContestDetailView.as_view()),
    path("admin/teams", AdminTeamListCreateView.as_view()),
    path("admin/teams/<uuid:id>", AdminTeamDetailView.as_view()),
    path("admin/matches", AdminMatchListCreateView.as_view()),
    path("admin/matches/<uuid:id>", AdminMatchDetailView.as_view()),
    path("admin/points/breakdown", AdminBreakdownView.as_view()),
    path("admin/points/recompute", AdminRecomputeView.as_view()),
    path("admin/stars", AdminStarCreateView.as_view()),
]
