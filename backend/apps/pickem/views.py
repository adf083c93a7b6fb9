from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.generics import (
    ListAPIView,
    ListCreateAPIView,
    RetrieveAPIView,
    RetrieveUpdateAPIView,
    RetrieveUpdateDestroyAPIView,
)
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import Conflict
from apps.core.profiles import public_profiles_for

from . import aggregator, ledger
from .models import Contest, Match, SubContest, Team
from .serializers import (
    BreakdownRequestSerializer,
    ContestAdminSerializer,
    ContestSerializer,
    LeaderboardRowSerializer,
    MatchAdminSerializer,
    MatchSerializer,
    OwnVoteSerializer,
    RecomputeRequestSerializer,
    StarRequestSerializer,
    StarSerializer,
    SubContestAdminSerializer,
    TeamAdminSerializer,
    TeamSerializer,
    VoteRequestSerializer,
    VoteSerializer,
)
from .tasks import recompute_contest_totals

logger = logging.getLogger(__name__)


class ContestListView(ListAPIView):
    queryset = Contest.objects.prefetch_related("sub_contests").order_by("-year", "name")
    serializer_class = ContestSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["kind", "year", "ongoing"]


class ContestDetailView(RetrieveAPIView):
    queryset = Contest.objects.prefetch_related("sub_contests")
    serializer_class = ContestSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "id"


class TeamListView(ListAPIView):
    queryset = Team.objects.order_by("name")
    serializer_class = TeamSerializer
    permission_classes = [permissions.AllowAny]


class MatchListView(ListAPIView):
    queryset = Match.objects.select_related("team1", "team2").order_by("match_date", "match_time")
    serializer_class = MatchSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["contest", "sub_contest", "region", "phase"]


class MatchDetailView(RetrieveAPIView):
    queryset = Match.objects.select_related("team1", "team2")
    serializer_class = MatchSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "id"


class MatchLockView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        return Response({"match_id": id, "locked": ledger.is_locked(id)})


# --- Votes ---

class MatchVotesView(APIView):
    """Public list of every vote on a match; voters are rendered as public profiles."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        votes = ledger.list_for_match(id)
        profiles = public_profiles_for(v.user_id for v in votes)
        data = VoteSerializer(votes, many=True, context={"profiles": profiles}).data
        return Response({"results": data})


class MatchVoteStatsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        counts = ledger.stats(id)
        teams = {t.pk: t for t in Team.objects.filter(pk__in=counts.keys())}
        results = []
        for team_id, row in counts.items():
            team = teams.get(team_id)
            results.append(
                {
                    "team_id": team_id,
                    "team_name": team.name if team else None,
                    "team_short_name": team.short_name if team else None,
                    "vote_count": row["count"],
                    "percentage": float(row["percentage"]),
                }
            )
        results.sort(key=lambda r: (-r["vote_count"], r["team_name"] or ""))
        return Response({"match_id": id, "as_of": timezone.now(), "results": results})


class MyVoteView(APIView):
    """The caller's own vote on a match: read, cast/change (PUT), retract (DELETE)."""

    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "vote"

    def get(self, request, id):
        vote = ledger.own_vote(request.user, id)
        if vote is None:
            return Response({"vote": None})
        return Response({"vote": OwnVoteSerializer(vote).data})

    def put(self, request, id):
        serializer = VoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vote, created = ledger.cast_or_update(request.user, id, serializer.validated_data["team_id"])
        return Response(
            {"vote": OwnVoteSerializer(vote).data, "created": created},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def delete(self, request, id):
        ledger.retract(request.user, id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# --- Leaderboard ---

class ContestLeaderboardView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        rows = aggregator.rank_leaderboard(aggregator.list_leaderboard(id))
        return Response({"as_of": timezone.now(), "results": LeaderboardRowSerializer(rows, many=True).data})


class ContestPointsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id, user_id: int):
        aggregator.get_contest(id)
        breakdowns = aggregator.breakdowns_for(user_id, id)
        return Response(
            {
                "contest_id": id,
                "user_id": user_id,
                "points": aggregator.get_total(user_id, id),
                "breakdowns": [{"region": b.region, "points": b.nr_points} for b in breakdowns],
            }
        )


class ContestStarsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        stars = aggregator.stars_for_contest(id, category=request.query_params.get("category"))
        profiles = public_profiles_for(s.user_id for s in stars)
        return Response({"results": StarSerializer(stars, many=True, context={"profiles": profiles}).data})


# --- Admin (ingestion) endpoints ---

class _ConflictOnIntegrityError:
    """Duplicate external ids / short names surface as 409 instead of a server error."""

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError as exc:
            logger.info("ingestion write rejected: %s", exc)
            raise Conflict("a row with the same unique key already exists") from exc

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError as exc:
            logger.info("ingestion write rejected: %s", exc)
            raise Conflict("a row with the same unique key already exists") from exc


class AdminContestListCreateView(_ConflictOnIntegrityError, ListCreateAPIView):
    queryset = Contest.objects.all().order_by("-created_at")
    serializer_class = ContestAdminSerializer
    permission_classes = [permissions.IsAdminUser]


class AdminContestDetailView(_ConflictOnIntegrityError, RetrieveUpdateAPIView):
    # Contests are never deleted through the API
    queryset = Contest.objects.all()
    serializer_class = ContestAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    lookup_field = "id"


class AdminSubContestListCreateView(_ConflictOnIntegrityError, ListCreateAPIView):
    queryset = SubContest.objects.all().order_by("-created_at")
    serializer_class = SubContestAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_fields = ["contest", "region"]


class AdminSubContestDetailView(_ConflictOnIntegrityError, RetrieveUpdateAPIView):
    queryset = SubContest.objects.all()
    serializer_class = SubContestAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    lookup_field = "id"


class AdminTeamListCreateView(_ConflictOnIntegrityError, ListCreateAPIView):
    queryset = Team.objects.all().order_by("name")
    serializer_class = TeamAdminSerializer
    permission_classes = [permissions.IsAdminUser]


class AdminTeamDetailView(_ConflictOnIntegrityError, RetrieveUpdateDestroyAPIView):
    queryset = Team.objects.all()
    serializer_class = TeamAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    lookup_field = "id"


class AdminMatchListCreateView(_ConflictOnIntegrityError, ListCreateAPIView):
    queryset = Match.objects.all().order_by("-created_at")
    serializer_class = MatchAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_fields = ["contest", "sub_contest", "region", "phase"]


class AdminMatchDetailView(_ConflictOnIntegrityError, RetrieveUpdateAPIView):
    queryset = Match.objects.all()
    serializer_class = MatchAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    lookup_field = "id"


class AdminBreakdownView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = BreakdownRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        breakdown = aggregator.upsert_breakdown(
            request.user, data["user_id"], data["contest_id"], data["region"], data["points"]
        )
        body = {
            "id": breakdown.id,
            "user_id": data["user_id"],
            "contest_id": data["contest_id"],
            "region": breakdown.region,
            "points": breakdown.nr_points,
        }
        if data["recompute"]:
            body["total"] = aggregator.recompute_total(request.user, data["user_id"], data["contest_id"])
        return Response(body)


class AdminRecomputeView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = RecomputeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        total = aggregator.recompute_total(request.user, data["user_id"], data["contest_id"])
        return Response({"user_id": data["user_id"], "contest_id": data["contest_id"], "total": total})


class AdminContestRecomputeView(APIView):
    """Queue recomputation of every total in a contest."""

    permission_classes = [permissions.IsAdminUser]

    def post(self, request, id):
        aggregator.get_contest(id)
        recompute_contest_totals.delay(str(id))
        return Response({"contest_id": id, "queued": True}, status=status.HTTP_202_ACCEPTED)


class AdminStarCreateView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = StarRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        star = aggregator.award_star(request.user, data["user_id"], data["contest_id"], data["category"])
        profiles = public_profiles_for([star.user_id])
        return Response(StarSerializer(star, context={"profiles": profiles}).data, status=status.HTTP_201_CREATED)
