"""
Consultation schedule endpoints.

``GET`` is public and served from a short-lived cache with public
cache-control directives; any credentials on it are ignored.  ``POST``
publishes a new consultation date and only accepts an administrator's
bearer JWT.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError
from django.utils.cache import patch_cache_control
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from rest_framework.throttling import UserRateThrottle

from medical.authentication import BearerJWTAuthentication
from medical.exceptions import GENERIC_SERVER_ERROR, SchedulingError
from medical.identity import ANONYMOUS, Identity, identity_from_request
from medical.serializers.scheduling import ConsultationDateCreateSerializer
from medical.services.scheduling import LIST_CACHE_KEY, create_consultation_date, list_consultation_dates

logger = logging.getLogger(__name__)


class ConsultationRateThrottle(UserRateThrottle):
    scope = 'consultation'


def _unauthorized() -> Response:
    return Response({'ok': False, 'error': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)


def _server_error() -> Response:
    return Response({'ok': False, 'error': GENERIC_SERVER_ERROR}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _bearer_identity(request) -> Identity:
    """Authenticate ``Authorization: Bearer <jwt>`` only.

    Legacy ``Token`` headers and broken JWTs both come back as ``ANONYMOUS``.
    """
    try:
        result = BearerJWTAuthentication().authenticate(request)
    except AuthenticationFailed:
        return ANONYMOUS
    if result is None:
        return ANONYMOUS
    request.user, request.auth = result
    return identity_from_request(request)


@api_view(['GET', 'POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([ConsultationRateThrottle])
def consultation_dates(request):
    if request.method == 'POST':
        return _create_consultation_date(request)
    return _list_consultation_dates(request)


def _list_consultation_dates(request):
    payload = cache.get(LIST_CACHE_KEY)
    if payload is None:
        try:
            payload = {'consultationDates': list_consultation_dates()}
        except DatabaseError:
            logger.exception('Error in consultation dates API (list)')
            return _server_error()
        cache.set(LIST_CACHE_KEY, payload, settings.CONSULTATION_LIST_TTL)
    response = Response(payload, status=status.HTTP_200_OK)
    patch_cache_control(
        response,
        public=True,
        s_maxage=settings.CONSULTATION_LIST_TTL,
        stale_while_revalidate=settings.CONSULTATION_LIST_STALE,
    )
    return response


def _create_consultation_date(request):
    identity = _bearer_identity(request)
    # role checks come before the body is even parsed
    if not identity.is_authenticated or not identity.is_admin:
        return _unauthorized()

    s = ConsultationDateCreateSerializer(data=request.data)
    if not s.is_valid():
        return Response({'ok': False, 'error': 'Invalid request data', 'details': s.errors},
                        status=status.HTTP_400_BAD_REQUEST)

    slots = [{'start_time': ts['startTime'], 'end_time': ts['endTime']} for ts in s.validated_data['timeSlots']]
    try:
        cd = create_consultation_date(identity, date=s.validated_data['date'], time_slots=slots)
    except SchedulingError as e:
        return Response({'ok': False, 'error': str(e)}, status=e.status_code)
    except DatabaseError:
        logger.exception('Error in consultation dates API (create)')
        return _server_error()
    return Response({'ok': True, 'consultationDate': cd}, status=status.HTTP_201_CREATED)
