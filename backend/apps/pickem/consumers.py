from __future__ import annotations

from channels.generic.websocket import AsyncJsonWebsocketConsumer


class _GroupConsumer(AsyncJsonWebsocketConsumer):
    """Joins the group named by `group_prefix` and the id captured from the URL."""

    group_prefix = ""

    async def connect(self):
        try:
            oid = self.scope["url_route"]["kwargs"]["id"]
        except KeyError:
            await self.close()
            return
        self.group_name = f"{self.group_prefix}.{oid}"
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        group_name = getattr(self, "group_name", None)
        if group_name:
            await self.channel_layer.group_discard(group_name, self.channel_name)


class LeaderboardConsumer(_GroupConsumer):
    """
    Streams ranked leaderboard rows for a contest.
    Group: f"leaderboard.{contest_id}"
    """

    group_prefix = "leaderboard"

    async def leaderboard_update(self, event):
        # event: { "type": "leaderboard.update", "payload": { "as_of": ..., "results": [...] } }
        await self.send_json({"type": "leaderboard", "payload": event.get("payload", {})})


class VoteStatsConsumer(_GroupConsumer):
    """
    Streams per-team vote stats for a match.
    Group: f"votes.{match_id}"
    """

    group_prefix = "votes"

    async def votes_update(self, event):
        await self.send_json({"type": "votes", "payload": event.get("payload", {})})
