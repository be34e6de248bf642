from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from medical.models import User

TEST_SET = [
    ("admin1", User.ROLE_ADMIN),
    ("nurse1", User.ROLE_STAFF),
    ("student1", User.ROLE_STUDENT),
]


class Command(BaseCommand):
    help = "Ensure local test users exist with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="ChangeMe123!")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": password, "is_active": True},
            )
            if not created:
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
