import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = 'Database connection error. Please try again.'


class SchedulingError(Exception):
    """Base class for errors raised by the scheduling service."""
    status_code = 400


class NotAuthorized(SchedulingError):
    status_code = 401

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message)


class InvalidSchedule(SchedulingError):
    def __init__(self, message: str = 'Invalid request data'):
        super().__init__(message)


class DuplicateConsultationDate(SchedulingError):
    def __init__(self, message: str = 'Consultation date already exists'):
        super().__init__(message)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error('Unhandled API error in %s', context.get('view'), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': GENERIC_SERVER_ERROR}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp) -> dict:
    # keep WWW-Authenticate so 401s stay 401s for clients
    challenge = resp.headers.get('WWW-Authenticate') if hasattr(resp, 'headers') else None
    return {'WWW-Authenticate': challenge} if challenge else {}
