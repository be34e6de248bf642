import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from medical.models import MedicalRecord

from .conftest import bearer_client

pytestmark = pytest.mark.django_db

URL = '/api/medical/records'


def _pdf(name='form.pdf', size=64):
    return SimpleUploadedFile(name, b'%PDF-1.4\n' + b'0' * size, content_type='application/pdf')


def _record(student, form_type=MedicalRecord.FORM_MEDICAL, **kw):
    return MedicalRecord.objects.create(student=student, form_type=form_type, file=_pdf(), **kw)


def test_students_only_see_their_own_records(student, other_student):
    mine = _record(student, notes='annual physical')
    _record(other_student, notes='not yours')
    r = bearer_client(student).get(URL)
    assert r.status_code == 200 and r.data['ok'] is True
    assert [x['id'] for x in r.data['records']] == [mine.id]
    assert r.data['records'][0]['formType'] == 'medical'
    assert r.data['records'][0]['status'] == 'PENDING'


def test_filter_by_type_and_search(student):
    physical = _record(student, notes='Annual physical exam')
    _record(student, notes='dental checkup')
    _record(student, MedicalRecord.FORM_IMMUNIZATION, notes='MMR booster')
    clearance = _record(student, MedicalRecord.FORM_CLEARANCE, department_name='Athletics')
    client = bearer_client(student)

    r = client.get(URL, {'type': 'medical', 'q': 'PHYSICAL'})
    assert [x['id'] for x in r.data['records']] == [physical.id]

    r = client.get(URL, {'q': 'athlet'})
    assert [x['id'] for x in r.data['records']] == [clearance.id]
    assert r.data['records'][0]['departmentName'] == 'Athletics'

    r = client.get(URL, {'type': 'immunization'})
    assert len(r.data['records']) == 1


def test_student_cannot_peek_at_other_students(student, other_student):
    _record(other_student)
    r = bearer_client(student).get(URL, {'studentId': other_student.id})
    assert r.data['records'] == []


def test_staff_can_list_a_students_records(staff_user, student):
    rec = _record(student)
    r = bearer_client(staff_user).get(URL, {'studentId': student.id})
    assert [x['id'] for x in r.data['records']] == [rec.id]


def test_listing_requires_authentication():
    assert APIClient().get(URL).status_code == 401


def test_upload_record(student):
    r = bearer_client(student).post(URL, {
        'formType': 'lab',
        'notes': '<script>alert(1)</script>CBC results',
        'file': _pdf('cbc.pdf'),
    }, format='multipart')
    assert r.status_code == 201
    rec = MedicalRecord.objects.get(id=r.data['record']['id'])
    assert rec.student_id == student.id
    assert rec.status == MedicalRecord.STATUS_PENDING
    assert '<script>' not in rec.notes
    assert rec.content_type == 'application/pdf'


def test_upload_rejects_unsupported_type(student):
    f = SimpleUploadedFile('run.sh', b'#!/bin/sh', content_type='application/x-sh')
    r = bearer_client(student).post(URL, {'formType': 'medical', 'file': f}, format='multipart')
    assert r.status_code == 400
    assert not MedicalRecord.objects.exists()


def test_upload_rejects_oversized_file(student, settings):
    settings.UPLOAD_MAX_MB = 0
    r = bearer_client(student).post(URL, {'formType': 'medical', 'file': _pdf()}, format='multipart')
    assert r.status_code == 400
    assert not MedicalRecord.objects.exists()


def test_clearance_upload_needs_department(student):
    r = bearer_client(student).post(URL, {'formType': 'clearance', 'file': _pdf()}, format='multipart')
    assert r.status_code == 400


def test_download_uses_form_prefix(student):
    rec = _record(student)
    r = bearer_client(student).get(f'{URL}/{rec.id}/download')
    assert r.status_code == 200
    assert f'Medical_History_{rec.id}.pdf' in r['Content-Disposition']
    assert b''.join(r.streaming_content).startswith(b'%PDF')


def test_download_is_owner_or_staff_only(student, other_student, staff_user):
    rec = _record(student, MedicalRecord.FORM_IMMUNIZATION)
    assert bearer_client(other_student).get(f'{URL}/{rec.id}/download').status_code == 403
    r = bearer_client(staff_user).get(f'{URL}/{rec.id}/download')
    assert r.status_code == 200
    assert f'Immunization_{rec.id}.pdf' in r['Content-Disposition']
    b''.join(r.streaming_content)


def test_download_missing_record_is_404(student):
    assert bearer_client(student).get(f'{URL}/999/download').status_code == 404


def test_staff_reviews_record(staff_user, student):
    rec = _record(student)
    r = bearer_client(staff_user).post(f'{URL}/{rec.id}/status', {'status': 'APPROVED'}, format='json')
    assert r.status_code == 200
    rec.refresh_from_db()
    assert rec.status == MedicalRecord.STATUS_APPROVED


def test_student_cannot_review_records(student):
    rec = _record(student)
    r = bearer_client(student).post(f'{URL}/{rec.id}/status', {'status': 'APPROVED'}, format='json')
    assert r.status_code == 403
    rec.refresh_from_db()
    assert rec.status == MedicalRecord.STATUS_PENDING
