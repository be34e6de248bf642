import logging
import os
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q

from medical.identity import STAFF_ROLES
from medical.models import MedicalRecord
from medical.services.audit import log_action

logger = logging.getLogger(__name__)

User = get_user_model()

DOWNLOAD_PREFIXES = {
    MedicalRecord.FORM_MEDICAL: 'Medical_History',
    MedicalRecord.FORM_IMMUNIZATION: 'Immunization',
    MedicalRecord.FORM_LAB: 'Lab_Results',
    MedicalRecord.FORM_CLEARANCE: 'Clearance',
}


def _is_staff(user) -> bool:
    return getattr(user, 'role', '') in STAFF_ROLES


def format_record(r: MedicalRecord) -> dict:
    data = {
        'id': r.id,
        'formType': r.form_type,
        'notes': r.notes,
        'status': r.status,
        'filePath': r.file.url if r.file else '',
        'createdAt': r.created_at.isoformat(),
        'updatedAt': r.updated_at.isoformat(),
    }
    if r.department_name:
        data['departmentName'] = r.department_name
    return data


def records_for(user, *, form_type: Optional[str]=None, q: Optional[str]=None, student_id: Optional[int]=None):
    """Queryset of records visible to ``user``, filtered and searched.

    Students only ever see their own records.  Staff see their own unless
    ``student_id`` points at another student.
    """
    owner_id = user.id
    if student_id and _is_staff(user):
        owner_id = student_id
    qs = MedicalRecord.objects.filter(student_id=owner_id)
    if form_type:
        qs = qs.filter(form_type=form_type)
    q = (q or '').strip()
    if q:
        qs = qs.filter(
            Q(form_type__icontains=q) | Q(notes__icontains=q)
            | Q(status__icontains=q) | Q(department_name__icontains=q)
        )
    return qs.order_by('-created_at', '-id')


def list_records(user, *, form_type: Optional[str]=None, q: Optional[str]=None, student_id: Optional[int]=None) -> list[dict]:
    return [format_record(r) for r in records_for(user, form_type=form_type, q=q, student_id=student_id)]


def _check_upload(f) -> str:
    size_mb = (f.size or 0) / (1024*1024)
    if size_mb > settings.UPLOAD_MAX_MB:
        raise ValueError('File too large')
    ctype = getattr(f, 'content_type', '') or ''
    if not any(ctype.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
        raise ValueError('Unsupported file type')
    return ctype


@transaction.atomic
def create_record(user, *, form_type: str, file, notes: Optional[str]=None, department_name: Optional[str]=None) -> MedicalRecord:
    ctype = _check_upload(file)
    record = MedicalRecord.objects.create(
        student=user,
        form_type=form_type,
        notes=notes or None,
        department_name=department_name or None,
        file=file,
        content_type=ctype,
    )
    log_action(user=user, action='record_upload', object_type='medical_record', object_id=record.id,
               detail={'formType': form_type, 'size': file.size or 0})
    return record


def get_record_for(user, record_id: int) -> MedicalRecord:
    """Return the record if ``user`` may read it.

    Raises ``MedicalRecord.DoesNotExist`` or ``PermissionError``.
    """
    record = MedicalRecord.objects.get(id=record_id)
    if record.student_id != user.id and not _is_staff(user):
        raise PermissionError('Not allowed to access this record')
    return record


def download_name(record: MedicalRecord) -> str:
    ext = os.path.splitext(record.file.name or '')[1]
    prefix = DOWNLOAD_PREFIXES.get(record.form_type, 'Record')
    return f"{prefix}_{record.id}{ext}"


def set_record_status(user, record: MedicalRecord, *, status: str, notes: Optional[str]=None) -> MedicalRecord:
    if not _is_staff(user):
        raise PermissionError('Only clinic staff can review records')
    record.status = status
    fields = ['status', 'updated_at']
    if notes:
        record.notes = notes
        fields.append('notes')
    record.save(update_fields=fields)
    log_action(user=user, action='record_review', object_type='medical_record', object_id=record.id,
               detail={'status': status})
    logger.info('Record %s marked %s by user %s', record.id, status, user.id)
    return record
