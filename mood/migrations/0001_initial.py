import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('goals', models.JSONField(blank=True, default=list)),
                ('tracking_categories', models.JSONField(blank=True, default=list, help_text='Activity ids the user chose to track')),
                ('onboarding_completed', models.BooleanField(default=False)),
                ('notifications_enabled', models.BooleanField(default=False)),
                ('preferred_notification_time', models.TimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='mood_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mood_user_profiles',
            },
        ),
        migrations.CreateModel(
            name='MoodEntry',
            fields=[
                ('entry_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('mood', models.PositiveSmallIntegerField(help_text='1=terrible, 2=bad, 3=okay, 4=good, 5=great', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('activities', models.JSONField(blank=True, default=list)),
                ('sleep_hours', models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(0.0), django.core.validators.MaxValueValidator(24.0)])),
                ('energy_level', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('note', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mood_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mood_entries',
                'ordering': ['timestamp'],
                'indexes': [
                    models.Index(fields=['user', 'timestamp'], name='mood_entry_history'),
                    models.Index(fields=['user', '-timestamp'], name='mood_entry_recent'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ActivityCorrelation',
            fields=[
                ('correlation_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('activity_id', models.CharField(max_length=100)),
                ('avg_mood_with', models.FloatField()),
                ('avg_mood_without', models.FloatField(blank=True, help_text='Null when every entry contains the activity', null=True)),
                ('success_rate', models.FloatField(help_text='Fraction of entries with this activity where mood >= 4', validators=[django.core.validators.MinValueValidator(0.0), django.core.validators.MaxValueValidator(1.0)])),
                ('times_observed', models.PositiveIntegerField()),
                ('last_calculated', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activity_correlations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mood_activity_correlations',
                'ordering': ['activity_id'],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'activity_id'), name='unique_user_activity_correlation'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Trigger',
            fields=[
                ('trigger_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('trigger_type', models.CharField(choices=[('missed_helpful_activity', 'Missed helpful activity'), ('low_mood_streak', 'Low mood streak'), ('sleep_warning', 'Sleep warning'), ('positive_streak', 'Positive streak')], max_length=40)),
                ('fired_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('message', models.TextField()),
                ('dismissed', models.BooleanField(default=False)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mood_triggers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mood_triggers',
                'ordering': ['-fired_at'],
                'indexes': [
                    models.Index(fields=['user', 'trigger_type', 'fired_at'], name='trigger_cooldown_lookup'),
                    models.Index(fields=['user', '-fired_at'], name='trigger_recent'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('notification_id', models.CharField(default=uuid.uuid4, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('info', 'Information'), ('reminder', 'Reminder'), ('trigger', 'Trigger'), ('achievement', 'Achievement')], default='info', max_length=20)),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('link', models.CharField(blank=True, default='', max_length=500)),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('trigger', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='notifications', to='mood.trigger')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mood_notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'mood_notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notification_unread'),
                    models.Index(fields=['user', '-created_at'], name='notification_recent'),
                ],
            },
        ),
    ]
