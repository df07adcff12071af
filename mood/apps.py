from django.apps import AppConfig
from django.conf import settings
import sys


class MoodConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mood"
    verbose_name = "Mood Insights"

    def ready(self):
        # Only the serving process runs jobs; management commands and tests don't
        if 'runserver' in sys.argv and getattr(settings, 'MOOD_SCHEDULER_ENABLED', False):
            from mood.integrations import scheduler
            scheduler.start_scheduler()
