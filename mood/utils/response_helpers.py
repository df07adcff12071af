"""
API response envelope.

Every endpoint answers with the same shape so clients can branch on
`success` and read `data` or `error` without per-endpoint parsing.
"""
from typing import Any, Dict, Optional

from django.http import JsonResponse


class UXResponse:
    """Builds success and error JsonResponses in the shared envelope."""

    @staticmethod
    def success(
        message: str = "OK",
        data: Optional[Dict[str, Any]] = None,
        status: int = 200,
        meta: Optional[Dict[str, Any]] = None
    ) -> JsonResponse:
        """
        Args:
            message: Short human-readable summary
            data: Response payload
            status: HTTP status code
            meta: Optional extra info (e.g. whether insights are personalized)
        """
        body = {
            'success': True,
            'message': message,
            'data': data if data is not None else {},
        }
        if meta:
            body['meta'] = meta
        return JsonResponse(body, status=status)

    @staticmethod
    def error(
        message: str = "An error occurred",
        error_code: str = "GENERAL_ERROR",
        retry: bool = False,
        status: int = 400,
        details: Optional[Dict[str, Any]] = None
    ) -> JsonResponse:
        """
        Args:
            message: Clear, actionable error message
            error_code: Stable code clients can switch on
            retry: Whether retrying the same request may succeed
            status: HTTP status code
            details: Field errors or other structured context
        """
        body = {
            'success': False,
            'error': {
                'message': message,
                'code': error_code,
                'retry': retry,
            },
        }
        if details:
            body['error']['details'] = details
        return JsonResponse(body, status=status)
