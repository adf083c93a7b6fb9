from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import NotFound
from apps.pickem.aggregator import recompute_contest
from apps.pickem.models import Contest
from apps.pickem.tasks import recompute_contest_totals


class Command(BaseCommand):
    help = "Recompute points totals from their regional breakdowns."

    def add_arguments(self, parser):
        parser.add_argument("--contest", help="Contest id (default: every ongoing contest)")
        parser.add_argument("--all", action="store_true", help="Include contests that are not ongoing")
        parser.add_argument("--async", dest="use_async", action="store_true", help="Queue celery tasks instead")

    def handle(self, *args, **options):
        if options["contest"]:
            contest_ids = [options["contest"]]
        else:
            qs = Contest.objects.all() if options["all"] else Contest.objects.filter(ongoing=True)
            contest_ids = [str(pk) for pk in qs.values_list("id", flat=True)]

        if not contest_ids:
            self.stdout.write(self.style.WARNING("No contests to recompute."))
            return

        for contest_id in contest_ids:
            if options["use_async"]:
                recompute_contest_totals.delay(contest_id)
                self.stdout.write(f"Queued contest {contest_id}")
                continue
            try:
                count = recompute_contest(contest_id)
            except NotFound:
                raise CommandError(f"Contest {contest_id} does not exist")
            self.stdout.write(self.style.SUCCESS(f"Recomputed {count} totals for contest {contest_id}"))
