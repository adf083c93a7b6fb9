from __future__ import annotations

from rest_framework import serializers

from apps.core.serializers import PublicProfileSerializer

from .models import REGION_CHOICES, Contest, Match, Star, SubContest, Team, Vote


class TeamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Team
        fields = ["id", "name", "short_name", "slug", "logo_path"]


class TeamAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Team
        fields = [
            "id",
            "name",
            "short_name",
            "slug",
            "logo_path",
            "external_id",
            "external_source",
            "metadata",
            "last_scraped_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        # Case-insensitive uniqueness is enforced by the database constraints
        validators = []


class SubContestSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubContest
        fields = ["id", "contest", "region", "match_url", "pickem_url"]


class SubContestAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubContest
        fields = [
            "id",
            "contest",
            "region",
            "match_url",
            "pickem_url",
            "external_id",
            "external_source",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        validators = []


class ContestSerializer(serializers.ModelSerializer):
    sub_contests = SubContestSerializer(many=True, read_only=True)

    class Meta:
        model = Contest
        fields = ["id", "name", "kind", "location", "year", "ongoing", "bracket_type", "sub_contests"]


class ContestAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Contest
        fields = [
            "id",
            "name",
            "kind",
            "location",
            "year",
            "ongoing",
            "bracket_type",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class MatchSerializer(serializers.ModelSerializer):
    team1 = TeamSerializer(read_only=True)
    team2 = TeamSerializer(read_only=True)
    winner_id = serializers.UUIDField(read_only=True, allow_null=True)
    starts_at = serializers.DateTimeField(read_only=True, allow_null=True)
    locked = serializers.SerializerMethodField()

    class Meta:
        model = Match
        fields = [
            "id",
            "contest",
            "sub_contest",
            "team1",
            "team2",
            "winner_id",
            "region",
            "phase",
            "match_type",
            "match_date",
            "match_time",
            "starts_at",
            "playoff_bracket_id",
            "locked",
        ]

    def get_locked(self, obj):
        return obj.is_locked()


class MatchAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Match
        fields = [
            "id",
            "contest",
            "sub_contest",
            "team1",
            "team2",
            "winner",
            "region",
            "phase",
            "match_type",
            "match_date",
            "match_time",
            "playoff_bracket_id",
            "external_id",
            "external_source",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        validators = []

    def validate(self, attrs):
        team1 = attrs.get("team1", getattr(self.instance, "team1", None))
        team2 = attrs.get("team2", getattr(self.instance, "team2", None))
        winner = attrs.get("winner", getattr(self.instance, "winner", None))
        if team1 is not None and team1 == team2:
            raise serializers.ValidationError({"team2": "A team cannot play itself."})
        if winner is not None and winner not in (team1, team2):
            raise serializers.ValidationError({"winner": "Winner must be one of the two teams."})
        return attrs


class _ProfileFromContextMixin:
    """Renders `user` from the projected profiles passed in context["profiles"]."""

    def get_user(self, obj):
        profile = self.context.get("profiles", {}).get(obj.user_id)
        if profile is None:
            return None
        return PublicProfileSerializer(profile).data


class VoteSerializer(_ProfileFromContextMixin, serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    voted_team_name = serializers.SerializerMethodField()
    voted_team_short_name = serializers.SerializerMethodField()

    class Meta:
        model = Vote
        fields = [
            "id",
            "user",
            "match",
            "vote_team",
            "voted_team_name",
            "voted_team_short_name",
            "created_at",
            "updated_at",
        ]

    def get_voted_team_name(self, obj):
        return obj.vote_team.name if obj.vote_team else None

    def get_voted_team_short_name(self, obj):
        return obj.vote_team.short_name if obj.vote_team else None


class OwnVoteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vote
        fields = ["id", "match", "vote_team", "created_at", "updated_at"]


class VoteRequestSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()


class StarSerializer(_ProfileFromContextMixin, serializers.ModelSerializer):
    user = serializers.SerializerMethodField()

    class Meta:
        model = Star
        fields = ["id", "user", "contest", "category", "created_at"]


class LeaderboardRowSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    user_id = serializers.IntegerField(source="principal_id")
    handle = serializers.CharField()
    display_name = serializers.CharField(allow_null=True)
    avatar_url = serializers.CharField(allow_null=True)
    points = serializers.IntegerField()


class BreakdownRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    contest_id = serializers.UUIDField()
    region = serializers.ChoiceField(choices=REGION_CHOICES)
    points = serializers.IntegerField(min_value=0)
    recompute = serializers.BooleanField(required=False, default=True)

    def to_internal_value(self, data):
        if hasattr(data, "copy") and isinstance(data.get("region"), str):
            data = data.copy()
            data["region"] = data["region"].strip().lower()
        return super().to_internal_value(data)


class RecomputeRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    contest_id = serializers.UUIDField()


class StarRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    contest_id = serializers.UUIDField()
    category = serializers.ChoiceField(choices=Star.CATEGORY_CHOICES)
