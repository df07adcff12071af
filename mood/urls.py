from django.urls import path

from mood import views_api

app_name = 'mood_api'

urlpatterns = [
    path('health/', views_api.api_health, name='health'),

    # Entries
    path('entries/', views_api.api_entry_create, name='entry_create'),

    # Insights
    path('insights/', views_api.api_insights, name='insights'),
    path('insights/correlations/', views_api.api_correlations, name='correlations'),
    path('insights/correlations/recompute/', views_api.api_correlations_recompute, name='correlations_recompute'),
    path('insights/patterns/', views_api.api_patterns, name='patterns'),
    path('insights/suggestions/', views_api.api_suggestions, name='suggestions'),

    # Triggers
    path('triggers/evaluate/', views_api.api_triggers_evaluate, name='triggers_evaluate'),
    path('triggers/<str:trigger_id>/dismiss/', views_api.api_trigger_dismiss, name='trigger_dismiss'),
]
