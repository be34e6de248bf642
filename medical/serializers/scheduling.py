from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers


class CalendarDateField(serializers.DateField):
    """Accept ``YYYY-MM-DD`` or a full ISO datetime and keep only the day.

    Datetimes are converted to the project time zone before the date is
    taken, so ``2026-11-02T23:30:00-05:00`` and ``2026-11-03`` can end up
    on the same consultation day.
    """

    def to_internal_value(self, value):
        if isinstance(value, str) and 'T' in value:
            try:
                dt = parse_datetime(value)
            except ValueError:
                dt = None
            if dt is None:
                self.fail('invalid', format='YYYY-MM-DD')
            if timezone.is_naive(dt):
                return dt.date()
            return timezone.localdate(dt)
        return super().to_internal_value(value)


class TimeSlotInputSerializer(serializers.Serializer):
    startTime = serializers.TimeField()
    endTime = serializers.TimeField()

    def validate(self, attrs):
        if attrs['endTime'] <= attrs['startTime']:
            raise serializers.ValidationError('endTime must be after startTime')
        return attrs


class ConsultationDateCreateSerializer(serializers.Serializer):
    date = CalendarDateField()
    timeSlots = TimeSlotInputSerializer(many=True, allow_empty=False)

    def validate_timeSlots(self, v):
        starts = [s['startTime'] for s in v]
        if len(starts) != len(set(starts)):
            raise serializers.ValidationError('duplicate startTime in timeSlots')
        return v
