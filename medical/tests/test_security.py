import pytest
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from medical.models import AuditEvent, User

pytestmark = pytest.mark.django_db


def login(client, username, password):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_no_role_bypass_in_login():
    client = APIClient()
    u = User.objects.create_user(username='u1', password='P@ssw0rd1', role='STUDENT')
    r = client.post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'ADMIN'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'STUDENT'
    u.refresh_from_db()
    assert u.role == 'STUDENT'


def test_login_returns_jwt_and_legacy_token(student):
    r = login(APIClient(), 'student1', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['jwt_access'] and r.data['jwt_refresh'] and r.data['token']
    assert r.data['user']['studentNumber'] == '2024-0001'
    assert AuditEvent.objects.filter(action='login', user=student).exists()


def test_bad_password_is_rejected_and_audited(student):
    r = login(APIClient(), 'student1', 'wrong')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert AuditEvent.objects.filter(action='login', user=None, detail__result='fail').exists()


def test_legacy_token_still_authenticates(student):
    client = APIClient()
    token = login(client, 'student1', 'P@ssw0rd1').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    assert client.get('/api/medical/records').status_code == 200


def test_refresh_returns_new_access_token(student):
    client = APIClient()
    refresh = login(client, 'student1', 'P@ssw0rd1').data['jwt_refresh']
    r = client.post(reverse('jwt_refresh_view'), {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']


def test_logout_blacklists_refresh_token(student):
    client = APIClient()
    data = login(client, 'student1', 'P@ssw0rd1').data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['jwt_access']}")
    r = client.post(reverse('jwt_logout_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 200 and r.data['blacklisted'] == 1
    assert BlacklistedToken.objects.count() == 1

    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 401


def test_unauthenticated_errors_use_unified_shape():
    r = APIClient().get('/api/medical/records')
    assert r.status_code == 401
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'api_error'


def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
