"""
Database models for the campus health backend.

These models capture the scheduling side of the student clinic
(consultation dates and their bookable time slots) together with the
medical records students submit through the portal.  Field names are
kept close to the JSON shapes the front-end consumes so that views can
map them one-to-one.
"""
from __future__ import annotations

import os
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import F, Q


class User(AbstractUser):
    """Custom user model with a portal role.

    ``ADMIN`` is the only role allowed to publish consultation dates.
    ``STAFF`` covers clinic personnel who may read any student's records.
    """
    ROLE_STUDENT = 'STUDENT'
    ROLE_STAFF = 'STAFF'
    ROLE_ADMIN = 'ADMIN'
    ROLE_CHOICES = [
        (ROLE_STUDENT, 'Student'),
        (ROLE_STAFF, 'Clinic staff'),
        (ROLE_ADMIN, 'Administrator'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_STUDENT, db_index=True)
    student_number = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class ConsultationDate(models.Model):
    """A calendar day on which the clinic offers consultations."""
    date = models.DateField(unique=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date']
        indexes = [
            models.Index(fields=['is_active', 'date'], name='medical_con_is_acti_5c1f0e_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.date:%Y-%m-%d}{'' if self.is_active else ' (inactive)'}"


class TimeSlot(models.Model):
    """A bookable interval inside a consultation date."""
    consultation_date = models.ForeignKey(
        ConsultationDate, on_delete=models.CASCADE, related_name='time_slots'
    )
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ['start_time']
        constraints = [
            models.UniqueConstraint(
                fields=['consultation_date', 'start_time'], name='uniq_slot_start_per_date'
            ),
            models.CheckConstraint(
                condition=Q(end_time__gt=F('start_time')), name='slot_ends_after_start'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.start_time:%H:%M}-{self.end_time:%H:%M} @ {self.consultation_date_id}"


def _record_upload(instance, filename: str) -> str:
    import datetime
    ext = os.path.splitext(filename)[1]
    return f"records/{datetime.date.today().strftime('%Y/%m')}/{uuid.uuid4().hex}{ext}"


class MedicalRecord(models.Model):
    """A form or document a student submitted to the clinic.

    Medical history, immunization and lab result uploads share this
    table and are told apart by ``form_type``.  Clearance requests also
    carry the department that asked for them.
    """
    FORM_MEDICAL = 'medical'
    FORM_IMMUNIZATION = 'immunization'
    FORM_LAB = 'lab'
    FORM_CLEARANCE = 'clearance'
    FORM_CHOICES = (
        (FORM_MEDICAL, 'Medical history'),
        (FORM_IMMUNIZATION, 'Immunization'),
        (FORM_LAB, 'Lab result'),
        (FORM_CLEARANCE, 'Clearance request'),
    )

    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    )

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_records')
    form_type = models.CharField(max_length=16, choices=FORM_CHOICES)
    notes = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    file = models.FileField(upload_to=_record_upload, max_length=512)
    content_type = models.CharField(max_length=128, blank=True, null=True)
    department_name = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['student', 'form_type', 'created_at'], name='medical_med_student_8a2d41_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.form_type} #{self.id} student={self.student_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='medical_aud_action_3b7e90_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='medical_aud_object__d41c2a_idx'),
        ]
