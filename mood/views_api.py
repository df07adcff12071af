"""
Mood Insights - JSON API Views

Thin endpoints over the services. Authentication, HTTP method checks and
error mapping are handled by decorators.
"""
import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError

from mood.repositories import MoodHistoryRepository, record_to_dict
from mood.serializers import CurrentMoodSerializer, MoodEntryCreateSerializer
from mood.services import (
    CorrelationService, InsightService, NotificationDispatcher, TriggerService,
)
from mood.services.insight_service import pattern_to_dict, suggestion_to_dict
from mood.utils.error_handlers import handle_service_errors
from mood.utils.response_helpers import UXResponse

logger = logging.getLogger(__name__)


def require_auth(view_func):
    """
    Session (browser) or SimpleJWT bearer (mobile) authentication.

    Answers 401 JSON instead of redirecting to a login page, and exempts the
    view from CSRF since token clients send no CSRF cookie.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if request.user.is_authenticated:
            return view_func(request, *args, **kwargs)

        auth_header = request.headers.get('Authorization')
        if auth_header and auth_header.startswith('Bearer '):
            try:
                auth_result = JWTAuthentication().authenticate(request)
            except (InvalidToken, TokenError, AuthenticationFailed) as e:
                return UXResponse.error(message=f'Invalid token: {e}', error_code='INVALID_TOKEN', status=401)
            if auth_result:
                request.user, _ = auth_result
                return view_func(request, *args, **kwargs)

        return UXResponse.error(message='Authentication required', error_code='UNAUTHORIZED', status=401)

    return csrf_exempt(_wrapped_view)


def _json_body(request) -> dict:
    if not request.body:
        return {}
    return json.loads(request.body)


# ============================================================================
# ENTRIES
# ============================================================================

@require_auth
@require_POST
@handle_service_errors
def api_entry_create(request):
    """Store a new mood check-in."""
    serializer = MoodEntryCreateSerializer(data=_json_body(request))
    serializer.is_valid(raise_exception=True)

    record = MoodHistoryRepository(request.user).create(**serializer.validated_data)
    return UXResponse.success(message="Mood logged", data={'entry': record_to_dict(record)}, status=201)


# ============================================================================
# INSIGHTS
# ============================================================================

@require_auth
@require_GET
@handle_service_errors
def api_insights(request):
    """Summary, correlations, patterns, suggestions and a journal prompt."""
    mood = None
    if 'mood' in request.GET:
        serializer = CurrentMoodSerializer(data=request.GET)
        serializer.is_valid(raise_exception=True)
        mood = serializer.validated_data['mood']

    bundle = InsightService(request.user).get_insights(current_mood=mood)
    return UXResponse.success(data=bundle, meta={'personalized': bundle['personalized']})


@require_auth
@require_GET
@handle_service_errors
def api_correlations(request):
    rows = CorrelationService(request.user).current()
    return UXResponse.success(data={'correlations': [record_to_dict(r) for r in rows]})


@require_auth
@require_POST
@handle_service_errors
def api_correlations_recompute(request):
    rows = CorrelationService(request.user).recompute()
    return UXResponse.success(
        message=f"Recomputed {len(rows)} correlations",
        data={'correlations': [record_to_dict(r) for r in rows]}
    )


@require_auth
@require_GET
@handle_service_errors
def api_patterns(request):
    patterns = InsightService(request.user).patterns()
    return UXResponse.success(data={'patterns': [pattern_to_dict(p) for p in patterns]})


@require_auth
@require_GET
@handle_service_errors
def api_suggestions(request):
    """Feasible suggestions for ?mood=N."""
    serializer = CurrentMoodSerializer(data=request.GET)
    serializer.is_valid(raise_exception=True)

    suggestions = InsightService(request.user).suggestions(serializer.validated_data['mood'])
    return UXResponse.success(
        data={'suggestions': [suggestion_to_dict(s) for s in suggestions]},
        meta={'personalized': any(s.personalized for s in suggestions)}
    )


# ============================================================================
# TRIGGERS
# ============================================================================

@require_auth
@require_POST
@handle_service_errors
def api_triggers_evaluate(request):
    result = TriggerService(request.user, dispatcher=NotificationDispatcher()).evaluate()
    message = "Trigger fired" if result.fired else "No trigger"
    return UXResponse.success(message=message, data=result.to_dict())


@require_auth
@require_POST
@handle_service_errors
def api_trigger_dismiss(request, trigger_id):
    record = TriggerService(request.user).dismiss(trigger_id)
    return UXResponse.success(message="Dismissed", data={'trigger': record_to_dict(record)})


def api_health(request):
    """Unauthenticated liveness probe."""
    return JsonResponse({'status': 'ok'})
