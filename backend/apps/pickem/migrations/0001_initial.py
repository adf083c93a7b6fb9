# Generated initial migration for pickem app
from django.db import migrations, models
import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Contest',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('kind', models.CharField(choices=[('kickoff', 'Kickoff'), ('masters', 'Masters'), ('champions', 'Champions')], max_length=32)),
                ('location', models.CharField(blank=True, default='', max_length=200)),
                ('year', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('ongoing', models.BooleanField(default=False)),
                ('bracket_type', models.CharField(blank=True, default='', max_length=64)),
                ('metadata', models.JSONField(blank=True, default=dict)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['name'], name='pickem_contest_name_idx'),
                    models.Index(fields=['kind'], name='pickem_contest_kind_idx'),
                    models.Index(fields=['year'], name='pickem_contest_year_idx'),
                    models.Index(fields=['ongoing'], name='pickem_contest_ongoing_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Team',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('short_name', models.CharField(max_length=32)),
                ('slug', models.SlugField(blank=True, max_length=120)),
                ('logo_path', models.CharField(blank=True, default='', max_length=300)),
                ('external_id', models.CharField(blank=True, max_length=120, null=True)),
                ('external_source', models.CharField(blank=True, max_length=32, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('last_scraped_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'indexes': [models.Index(fields=['name'], name='pickem_team_name_idx')],
                'constraints': [
                    models.UniqueConstraint(django.db.models.functions.text.Lower('short_name'), name='pickem_team_short_name_uniq'),
                    models.UniqueConstraint(django.db.models.functions.text.Lower('slug'), name='pickem_team_slug_uniq'),
                    models.UniqueConstraint(fields=('external_source', 'external_id'), name='pickem_team_external_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SubContest',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('region', models.CharField(max_length=32)),
                ('match_url', models.URLField(blank=True, default='', max_length=500)),
                ('pickem_url', models.URLField(blank=True, default='', max_length=500)),
                ('external_id', models.CharField(blank=True, max_length=120, null=True)),
                ('external_source', models.CharField(blank=True, max_length=32, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sub_contests', to='pickem.contest')),
            ],
            options={
                'indexes': [models.Index(fields=['region'], name='pickem_subcontest_region_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('external_source', 'external_id'), name='pickem_subcontest_external_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Match',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('region', models.CharField(blank=True, default='', max_length=32)),
                ('phase', models.CharField(blank=True, default='', max_length=64)),
                ('match_type', models.CharField(blank=True, default='', max_length=16)),
                ('match_date', models.DateField(blank=True, null=True)),
                ('match_time', models.TimeField(blank=True, null=True)),
                ('playoff_bracket_id', models.CharField(blank=True, default='', max_length=64)),
                ('external_id', models.CharField(blank=True, max_length=120, null=True)),
                ('external_source', models.CharField(blank=True, max_length=32, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matches', to='pickem.contest')),
                ('sub_contest', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='matches', to='pickem.subcontest')),
                ('team1', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='pickem.team')),
                ('team2', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='pickem.team')),
                ('winner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='pickem.team')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['match_date'], name='pickem_match_date_idx'),
                    models.Index(fields=['region'], name='pickem_match_region_idx'),
                    models.Index(fields=['phase'], name='pickem_match_phase_idx'),
                    models.Index(fields=['team1', 'team2'], name='pickem_match_teams_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('external_source', 'external_id'), name='pickem_match_external_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Vote',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='votes', to='core.userprofile')),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='votes', to='pickem.match')),
                ('vote_team', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='votes', to='pickem.team')),
            ],
            options={
                'indexes': [models.Index(fields=['match', 'vote_team'], name='pickem_vote_match_team_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'match'), name='pickem_vote_user_match_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Points',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('nr_points', models.IntegerField(default=0)),
                ('external_id', models.CharField(blank=True, max_length=120, null=True)),
                ('external_source', models.CharField(blank=True, max_length=32, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='points', to='core.userprofile')),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='points', to='pickem.contest')),
            ],
            options={
                'verbose_name_plural': 'points',
                'indexes': [models.Index(fields=['contest', '-nr_points'], name='pickem_points_rank_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'contest'), name='pickem_points_user_contest_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BreakdownPoints',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('region', models.CharField(choices=[('americas', 'Americas'), ('emea', 'EMEA'), ('pacific', 'Pacific'), ('china', 'China'), ('international', 'International')], max_length=32)),
                ('nr_points', models.IntegerField(default=0)),
                ('source_handle', models.CharField(blank=True, default='', max_length=150)),
                ('external_id', models.CharField(blank=True, max_length=120, null=True)),
                ('external_source', models.CharField(blank=True, max_length=32, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('points', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='breakdowns', to='pickem.points')),
            ],
            options={
                'verbose_name_plural': 'breakdown points',
                'constraints': [
                    models.UniqueConstraint(fields=('points', 'region'), name='pickem_breakdown_points_region_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Star',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('category', models.CharField(choices=[('kickoff_winner', 'Kickoff winner'), ('masters_winner', 'Masters winner'), ('champions_winner', 'Champions winner')], max_length=32)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stars', to='core.userprofile')),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stars', to='pickem.contest')),
            ],
            options={
                'indexes': [models.Index(fields=['category'], name='pickem_star_category_idx')],
            },
        ),
    ]
