from django import forms
from django.contrib import admin

from . import aggregator
from .models import BreakdownPoints, Contest, Match, Points, Star, SubContest, Team, Vote


@admin.register(Contest)
class ContestAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "kind", "year", "ongoing", "created_at")
    list_filter = ("kind", "ongoing", "year")
    search_fields = ("name", "location")

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(SubContest)
class SubContestAdmin(admin.ModelAdmin):
    list_display = ("id", "contest", "region", "external_source", "external_id")
    list_filter = ("region",)
    search_fields = ("contest__name",)


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "short_name", "slug", "external_source", "last_scraped_at")
    search_fields = ("name", "short_name", "slug")


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("id", "contest", "team1", "team2", "winner", "region", "phase", "match_date", "match_time")
    list_filter = ("region", "phase", "contest")
    search_fields = ("team1__name", "team2__name", "playoff_bracket_id")


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    # Votes are written only by their owner through the ledger
    list_display = ("id", "user", "match", "vote_team", "created_at", "updated_at")
    search_fields = ("user__handle",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class BreakdownPointsForm(forms.ModelForm):
    class Meta:
        model = BreakdownPoints
        fields = ("region", "nr_points", "source_handle")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.instance._state.adding:
            # region is immutable once the row exists
            self.fields["region"].disabled = True


class BreakdownPointsInline(admin.TabularInline):
    model = BreakdownPoints
    form = BreakdownPointsForm
    extra = 0
    fields = ("region", "nr_points", "source_handle", "created_at", "updated_at")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Points)
class PointsAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "contest", "nr_points", "updated_at")
    list_filter = ("contest",)
    search_fields = ("user__handle",)
    fields = ("user", "contest", "nr_points", "created_at", "updated_at")
    readonly_fields = ("user", "contest", "nr_points", "created_at", "updated_at")
    inlines = [BreakdownPointsInline]

    def has_add_permission(self, request):
        return False

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        points = form.instance
        aggregator.recompute_total(request.user, points.user_id, points.contest_id)


@admin.register(Star)
class StarAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "contest", "category", "created_at")
    list_filter = ("category",)
    search_fields = ("user__handle",)

    def has_change_permission(self, request, obj=None):
        # Stars are insert-only
        return False
