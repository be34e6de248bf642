"""
URL mappings for the campus health API and student pages.

Paths mirror those used by the portal front-end; trailing slashes are
deliberately omitted (``APPEND_SLASH = False``).
"""
from django.contrib.auth import views as auth_views
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import health
from .views.pages import record_page, consultation_page
from .views.records import medical_records, record_download, record_status
from .views.scheduling import consultation_dates


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    # Consultation scheduling
    path('api/consultation/dates', consultation_dates, name='consultation_dates'),
    # Medical records
    path('api/medical/records', medical_records, name='medical_records'),
    path('api/medical/records/<int:pk>/download', record_download, name='record_download'),
    path('api/medical/records/<int:pk>/status', record_status, name='record_status'),
    # Student pages
    path('accounts/login', auth_views.LoginView.as_view(template_name='medical/login.html'), name='login'),
    path('student/consultation', consultation_page, name='consultation_page'),
    path('student/medical/<slug:kind>', record_page, name='record_page'),
]
