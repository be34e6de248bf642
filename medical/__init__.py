"""Campus health application.

Models, serializers, services and views for consultation scheduling and
student medical records.
"""
