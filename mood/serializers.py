"""
Input Validation Serializers

Validates API input with Django REST Framework serializers before it reaches
the services.
"""
from rest_framework import serializers

from mood.utils.constants import ENERGY_MAX, ENERGY_MIN, MOOD_MAX, MOOD_MIN, SLEEP_HOURS_MAX


class MoodEntryCreateSerializer(serializers.Serializer):
    """Validate a new mood check-in"""

    mood = serializers.IntegerField(
        min_value=MOOD_MIN,
        max_value=MOOD_MAX,
        help_text="1=terrible ... 5=great"
    )

    activities = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        required=False,
        default=list,
        help_text="Activity ids, e.g. ['exercise', 'work']"
    )

    timestamp = serializers.DateTimeField(required=False)

    sleep_hours = serializers.FloatField(
        min_value=0.0,
        max_value=SLEEP_HOURS_MAX,
        required=False,
        allow_null=True
    )

    energy_level = serializers.IntegerField(
        min_value=ENERGY_MIN,
        max_value=ENERGY_MAX,
        required=False,
        allow_null=True
    )

    note = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_activities(self, value):
        """Drop blanks and duplicates, keep order"""
        cleaned = [a.strip() for a in value if a and a.strip()]
        return list(dict.fromkeys(cleaned))


class CurrentMoodSerializer(serializers.Serializer):
    """Query parameters for the suggestions endpoint"""

    mood = serializers.IntegerField(min_value=MOOD_MIN, max_value=MOOD_MAX)
