from datetime import datetime, timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from medical.exceptions import DuplicateConsultationDate
from medical.identity import Identity
from medical.models import User
from medical.services.scheduling import create_consultation_date


def _slots(start: str, end: str, minutes: int) -> list[dict]:
    cur = datetime.strptime(start, "%H:%M")
    stop = datetime.strptime(end, "%H:%M")
    step = timedelta(minutes=minutes)
    slots = []
    while cur + step <= stop:
        slots.append({"start_time": cur.time(), "end_time": (cur + step).time()})
        cur += step
    return slots


class Command(BaseCommand):
    help = "Publish consultation dates for the coming weekdays with evenly sized slots."

    def add_arguments(self, parser):
        parser.add_argument("--admin", required=True, help="username of an ADMIN user")
        parser.add_argument("--days", type=int, default=5,
                            help="weekdays to consider; already published ones are skipped")
        parser.add_argument("--start", default="09:00")
        parser.add_argument("--end", default="12:00")
        parser.add_argument("--minutes", type=int, default=30)

    def handle(self, *args, **opts):
        try:
            admin = User.objects.get(username=opts["admin"])
        except User.DoesNotExist:
            raise CommandError(f"user {opts['admin']} not found")
        identity = Identity(user_id=admin.id, role=admin.role)
        if not identity.is_admin:
            raise CommandError(f"user {admin.username} is not an ADMIN")
        slots = _slots(opts["start"], opts["end"], opts["minutes"])
        if not slots:
            raise CommandError("no slot fits between --start and --end")

        day = timezone.localdate()
        seen = 0
        while seen < opts["days"]:
            day += timedelta(days=1)
            if day.weekday() >= 5:
                continue
            try:
                create_consultation_date(identity, date=day, time_slots=slots)
                self.stdout.write(self.style.SUCCESS(f"created {day} ({len(slots)} slots)"))
            except DuplicateConsultationDate:
                self.stdout.write(f"skip {day}: already published")
            seen += 1
