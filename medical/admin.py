"""
Django admin registrations for the medical app.

Consultation dates are edited together with their time slots through an
inline, so an administrator can also publish a day from ``/admin/``.
Saving through the admin drops the cached schedule the same way the API
does.
"""

from django.contrib import admin
from django.db import transaction

from .models import User, ConsultationDate, TimeSlot, MedicalRecord, AuditEvent
from .services.scheduling import invalidate_schedule_cache


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'student_number', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name', 'student_number')


class TimeSlotInline(admin.TabularInline):
    model = TimeSlot
    extra = 1


@admin.register(ConsultationDate)
class ConsultationDateAdmin(admin.ModelAdmin):
    list_display = ('date', 'is_active', 'created_at')
    list_filter = ('is_active',)
    date_hierarchy = 'date'
    inlines = [TimeSlotInline]

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        transaction.on_commit(invalidate_schedule_cache, robust=True)


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'form_type', 'status', 'department_name', 'created_at')
    list_filter = ('form_type', 'status')
    search_fields = ('student__username', 'student__student_number', 'notes', 'department_name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
