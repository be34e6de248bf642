import bleach
from rest_framework import serializers

from medical.models import MedicalRecord

FORM_TYPES = [c[0] for c in MedicalRecord.FORM_CHOICES]
STATUSES = [c[0] for c in MedicalRecord.STATUS_CHOICES]


class RecordListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=FORM_TYPES, required=False)
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)
    studentId = serializers.IntegerField(min_value=1, required=False)


class RecordUploadSerializer(serializers.Serializer):
    formType = serializers.ChoiceField(choices=FORM_TYPES)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    departmentName = serializers.CharField(max_length=255, required=False, allow_blank=True)
    file = serializers.FileField()

    def validate_notes(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate_departmentName(self, v):
        return bleach.clean((v or '').strip(), strip=True)

    def validate(self, attrs):
        if attrs['formType'] == MedicalRecord.FORM_CLEARANCE and not attrs.get('departmentName'):
            raise serializers.ValidationError({'departmentName': 'required for clearance requests'})
        return attrs


class RecordStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUSES)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)

    def validate_notes(self, v):
        return bleach.clean((v or '').strip(), strip=True)
