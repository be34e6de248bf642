"""
Server-rendered student pages.

Each records page shows one form type for the logged-in student in a
table with a search box (``?q=``) and download links.  The consultation
page shows the published schedule.
"""
from dataclasses import dataclass

from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import render

from medical.models import MedicalRecord
from medical.services.records import records_for
from medical.services.scheduling import list_consultation_dates


@dataclass(frozen=True)
class RecordPage:
    form_type: str
    title: str
    description: str
    crumb: str


RECORD_PAGES = {
    'history': RecordPage(MedicalRecord.FORM_MEDICAL, 'Medical History',
                          'View and manage your complete medical history records.', 'History'),
    'immunizations': RecordPage(MedicalRecord.FORM_IMMUNIZATION, 'Immunization Records',
                                'View your submitted immunization records.', 'Immunizations'),
    'lab-results': RecordPage(MedicalRecord.FORM_LAB, 'Lab Results',
                              'View your laboratory test results.', 'Lab Results'),
}


@login_required
def record_page(request, kind: str):
    page = RECORD_PAGES.get(kind)
    if page is None:
        raise Http404('Unknown records page')
    q = (request.GET.get('q') or '').strip()[:64]
    records = records_for(request.user, form_type=page.form_type, q=q)
    return render(request, 'medical/records.html', {
        'page': page,
        'records': records,
        'search_query': q,
    })


@login_required
def consultation_page(request):
    return render(request, 'medical/consultation.html', {
        'consultation_dates': list_consultation_dates(),
    })
