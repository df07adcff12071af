from django.contrib import admin

from mood.models import ActivityCorrelation, MoodEntry, Notification, Trigger, UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'onboarding_completed', 'notifications_enabled', 'created_at')
    list_filter = ('onboarding_completed', 'notifications_enabled')
    search_fields = ('user__username', 'user__email')


@admin.register(MoodEntry)
class MoodEntryAdmin(admin.ModelAdmin):
    list_display = ('user', 'mood', 'timestamp', 'sleep_hours', 'energy_level')
    list_filter = ('mood',)
    search_fields = ('user__username', 'note')
    date_hierarchy = 'timestamp'
    readonly_fields = ('entry_id', 'created_at')

    def has_change_permission(self, request, obj=None):
        """Entries are write-once"""
        return False


@admin.register(ActivityCorrelation)
class ActivityCorrelationAdmin(admin.ModelAdmin):
    list_display = ('user', 'activity_id', 'success_rate', 'times_observed', 'avg_mood_with',
                    'avg_mood_without', 'last_calculated')
    search_fields = ('user__username', 'activity_id')
    readonly_fields = ('last_calculated',)


@admin.register(Trigger)
class TriggerAdmin(admin.ModelAdmin):
    list_display = ('user', 'trigger_type', 'fired_at', 'dismissed')
    list_filter = ('trigger_type', 'dismissed')
    search_fields = ('user__username', 'message')
    readonly_fields = ('trigger_id', 'trigger_type', 'fired_at', 'message')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('user', 'type', 'title', 'is_read', 'created_at')
    list_filter = ('type', 'is_read')
    search_fields = ('user__username', 'title')
