from datetime import time, timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client
from django.utils import timezone

from medical.models import ConsultationDate, MedicalRecord, TimeSlot

pytestmark = pytest.mark.django_db


def _record(student, form_type, notes):
    f = SimpleUploadedFile('f.pdf', b'%PDF-1.4', content_type='application/pdf')
    return MedicalRecord.objects.create(student=student, form_type=form_type, notes=notes, file=f)


def test_record_pages_require_login():
    r = Client().get('/student/medical/history')
    assert r.status_code == 302
    assert r['Location'].startswith('/accounts/login')


def test_history_page_lists_and_searches_own_records(student, other_student):
    flu = _record(student, MedicalRecord.FORM_MEDICAL, 'flu visit')
    _record(student, MedicalRecord.FORM_MEDICAL, 'sprained ankle')
    _record(student, MedicalRecord.FORM_LAB, 'flu swab')
    _record(other_student, MedicalRecord.FORM_MEDICAL, 'flu visit too')
    client = Client()
    client.force_login(student)

    r = client.get('/student/medical/history')
    assert r.status_code == 200
    assert r.context['page'].title == 'Medical History'
    assert len(r.context['records']) == 2

    r = client.get('/student/medical/history', {'q': 'flu'})
    assert [x.id for x in r.context['records']] == [flu.id]
    assert r.context['search_query'] == 'flu'
    assert b'flu visit' in r.content
    assert f'/api/medical/records/{flu.id}/download'.encode() in r.content


def test_lab_results_page(student):
    _record(student, MedicalRecord.FORM_LAB, 'CBC')
    client = Client()
    client.force_login(student)
    r = client.get('/student/medical/lab-results')
    assert r.status_code == 200
    assert len(r.context['records']) == 1


def test_unknown_records_page_is_404(student):
    client = Client()
    client.force_login(student)
    assert client.get('/student/medical/dental').status_code == 404


def test_consultation_page_shows_schedule(student):
    day = timezone.localdate() + timedelta(days=3)
    cd = ConsultationDate.objects.create(date=day)
    TimeSlot.objects.create(consultation_date=cd, start_time=time(9), end_time=time(9, 30))
    client = Client()
    client.force_login(student)
    r = client.get('/student/consultation')
    assert r.status_code == 200
    assert day.isoformat().encode() in r.content
    assert b'09:00 - 09:30' in r.content
