import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from medical.models import User


@pytest.fixture(autouse=True)
def _clear_cache():
    # the consultation list and throttle counters live in the locmem cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / 'media'


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin1', password='P@ssw0rd1', role=User.ROLE_ADMIN)


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='nurse1', password='P@ssw0rd1', role=User.ROLE_STAFF)


@pytest.fixture
def student(db):
    return User.objects.create_user(username='student1', password='P@ssw0rd1', role=User.ROLE_STUDENT,
                                    student_number='2024-0001')


@pytest.fixture
def other_student(db):
    return User.objects.create_user(username='student2', password='P@ssw0rd1', role=User.ROLE_STUDENT)


def bearer_client(user) -> APIClient:
    """APIClient sending ``Authorization: Bearer <jwt>`` for ``user``."""
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client
