"""
Consultation scheduling: published dates and their time slots.

Students read the upcoming schedule; administrators publish a date
together with all of its slots in one transaction.  The HTTP layer keeps
a short-lived copy of the listing in the Django cache which is dropped
whenever a new date is committed.
"""
import logging
from datetime import date as date_cls
from typing import Iterable, Mapping, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from medical.exceptions import DuplicateConsultationDate, InvalidSchedule, NotAuthorized
from medical.identity import Identity
from medical.models import ConsultationDate, TimeSlot
from medical.services.audit import log_action

logger = logging.getLogger(__name__)

# Cache key for the payload served at /api/consultation/dates
LIST_CACHE_KEY = 'consultation:dates'
SCHEDULE_GROUP = 'schedule'


def format_slot(slot: TimeSlot) -> dict:
    return {
        'id': slot.id,
        'startTime': slot.start_time.strftime('%H:%M'),
        'endTime': slot.end_time.strftime('%H:%M'),
        'isAvailable': slot.is_available,
        'consultationDateId': slot.consultation_date_id,
    }


def format_consultation_date(cd: ConsultationDate, slots: Iterable[TimeSlot]) -> dict:
    return {
        'id': cd.id,
        'date': cd.date.isoformat(),
        'isActive': cd.is_active,
        'createdAt': cd.created_at.isoformat(),
        'updatedAt': cd.updated_at.isoformat(),
        'timeSlots': [format_slot(s) for s in slots],
    }


def list_consultation_dates(*, today: Optional[date_cls]=None) -> list[dict]:
    """Active dates strictly after ``today``, each with its available slots.

    A date is stored at local midnight, so today has already started and
    is left out.  Dates come back in calendar order and slots by start time.
    """
    today = today or timezone.localdate()
    available = Prefetch(
        'time_slots',
        queryset=TimeSlot.objects.filter(is_available=True).order_by('start_time'),
        to_attr='available_slots',
    )
    qs = (ConsultationDate.objects
          .filter(is_active=True, date__gt=today)
          .prefetch_related(available)
          .order_by('date'))
    return [format_consultation_date(cd, cd.available_slots) for cd in qs]


def invalidate_schedule_cache() -> None:
    cache.delete(LIST_CACHE_KEY)
    channel_layer = get_channel_layer()
    if channel_layer is not None:
        now = timezone.now()
        event = {"type": "schedule.refresh", "ts": now.isoformat(), "keys": [LIST_CACHE_KEY]}
        async_to_sync(channel_layer.group_send)(SCHEDULE_GROUP, event)


def create_consultation_date(identity: Identity, *, date: date_cls, time_slots: list[Mapping]) -> dict:
    """Publish ``date`` with one available slot per descriptor.

    ``time_slots`` items carry ``start_time`` and ``end_time``.  Either
    the date and every slot are stored, or nothing is.
    """
    if not identity.is_authenticated or not identity.is_admin:
        raise NotAuthorized()
    if not date or not time_slots:
        raise InvalidSchedule()

    if ConsultationDate.objects.filter(date=date).exists():
        raise DuplicateConsultationDate()

    with transaction.atomic():
        try:
            # savepoint: a concurrent insert of the same date lands here
            with transaction.atomic():
                cd = ConsultationDate.objects.create(date=date)
        except IntegrityError as e:
            logger.info('Consultation date %s inserted concurrently', date)
            raise DuplicateConsultationDate() from e

        TimeSlot.objects.bulk_create([
            TimeSlot(
                consultation_date=cd,
                start_time=s['start_time'],
                end_time=s['end_time'],
                is_available=True,
            )
            for s in time_slots
        ])
        log_action(user_id=identity.user_id, action='consultation_date_create',
                   object_type='consultation_date', object_id=cd.id,
                   detail={'date': date.isoformat(), 'slots': len(time_slots)})
        transaction.on_commit(invalidate_schedule_cache, robust=True)

    slots = list(cd.time_slots.order_by('start_time'))
    logger.info('Consultation date %s created with %d slots by user %s', date, len(slots), identity.user_id)
    return format_consultation_date(cd, slots)
