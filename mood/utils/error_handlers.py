"""
Error Handling Utilities

Maps service-layer exceptions to UXResponse errors so API views stay free of
try/except boilerplate.
"""
from functools import wraps
import json
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework.exceptions import ValidationError as DRFValidationError

from mood.exceptions import (
    MoodException,
    StorageError,
    TriggerNotFoundError,
    ValidationError as MoodValidationError,
)
from mood.utils.response_helpers import UXResponse

logger = logging.getLogger(__name__)


def _first_validation_message(e) -> str:
    if getattr(e, 'message_dict', None):
        field = next(iter(e.message_dict))
        return f"{field}: {e.message_dict[field][0]}"
    detail = getattr(e, 'detail', None)
    if isinstance(detail, dict) and detail:
        field = next(iter(detail))
        value = detail[field]
        if isinstance(value, list) and value:
            value = value[0]
        return f"{field}: {value}"
    if detail:
        return str(detail)
    return str(e)


def handle_service_errors(view_func):
    """
    Decorator for API views.

    404 for missing objects, 400 for bad input, 503 (retry=True) for store
    failures, 500 for anything unexpected.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)

        except (TriggerNotFoundError, Http404, ObjectDoesNotExist) as e:
            return UXResponse.error(message=str(e), error_code="NOT_FOUND", status=404)

        except json.JSONDecodeError:
            return UXResponse.error(message="Invalid JSON body", error_code="VALIDATION_ERROR", status=400)

        except MoodValidationError as e:
            return UXResponse.error(message=str(e), error_code="VALIDATION_ERROR", status=400)

        except (DjangoValidationError, DRFValidationError) as e:
            return UXResponse.error(
                message=_first_validation_message(e),
                error_code="VALIDATION_ERROR",
                status=400
            )

        except StorageError as e:
            logger.error(f"Storage failure in {view_func.__name__}: {e}")
            return UXResponse.error(
                message="Your data is temporarily unavailable. Please try again.",
                error_code="STORAGE_ERROR",
                retry=True,
                status=503
            )

        except MoodException as e:
            return UXResponse.error(message=str(e), error_code="MOOD_ERROR", status=400)

        except Exception:
            logger.exception(f"Unhandled error in {view_func.__name__}")
            return UXResponse.error(
                message="An unexpected error occurred",
                error_code="INTERNAL_ERROR",
                retry=True,
                status=500
            )

    return wrapper
