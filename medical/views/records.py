"""
Student medical record endpoints.

Students list, search, upload and download their own forms (medical
history, immunization, lab results, clearance requests).  Clinic staff
may look at any student's records and review them.
"""
from __future__ import annotations

from django.http import FileResponse
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from medical.models import MedicalRecord
from medical.permissions import IsClinicStaff
from medical.serializers.records import RecordListQuerySerializer, RecordUploadSerializer, RecordStatusSerializer
from medical.services.records import (
    create_record,
    download_name,
    format_record,
    get_record_for,
    list_records,
    set_record_status,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def medical_records(request):
    if request.method == 'POST':
        return _upload_record(request)
    q = RecordListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    data = list_records(
        request.user,
        form_type=q.validated_data.get('type'),
        q=q.validated_data.get('q'),
        student_id=q.validated_data.get('studentId'),
    )
    return Response({'ok': True, 'records': data})


def _upload_record(request):
    s = RecordUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        record = create_record(
            request.user,
            form_type=s.validated_data['formType'],
            file=s.validated_data['file'],
            notes=s.validated_data.get('notes'),
            department_name=s.validated_data.get('departmentName'),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'record': format_record(record)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def record_download(request, pk: int):
    try:
        record = get_record_for(request.user, pk)
    except MedicalRecord.DoesNotExist:
        return Response({'ok': False, 'detail': 'Record not found'}, status=404)
    except PermissionError as e:
        return Response({'ok': False, 'detail': str(e)}, status=403)
    if not record.file:
        return Response({'ok': False, 'detail': 'Record has no file'}, status=404)
    return FileResponse(
        record.file.open('rb'),
        as_attachment=True,
        filename=download_name(record),
        content_type=record.content_type or None,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsClinicStaff])
def record_status(request, pk: int):
    s = RecordStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        record = get_record_for(request.user, pk)
        record = set_record_status(request.user, record, status=s.validated_data['status'],
                                   notes=s.validated_data.get('notes'))
    except MedicalRecord.DoesNotExist:
        return Response({'ok': False, 'detail': 'Record not found'}, status=404)
    except PermissionError as e:
        return Response({'ok': False, 'detail': str(e)}, status=403)
    return Response({'ok': True, 'record': format_record(record)})
