"""
Intake URLs - templates and submissions.
"""
from django.urls import path

from .views import (
    ActiveIntakeTemplateListView,
    AppointmentIntakeView,
    IntakeSubmitView,
    IntakeTemplateCreateView,
    IntakeTemplateDeactivateView,
)

urlpatterns = [
    path('templates/', IntakeTemplateCreateView.as_view(), name='intake-template-create'),
    path('templates/active/', ActiveIntakeTemplateListView.as_view(), name='intake-template-active'),
    path(
        'templates/<uuid:template_id>/deactivate/',
        IntakeTemplateDeactivateView.as_view(),
        name='intake-template-deactivate'
    ),
    path(
        'appointment/<uuid:appointment_id>/',
        AppointmentIntakeView.as_view(),
        name='intake-appointment'
    ),
    path('submit/', IntakeSubmitView.as_view(), name='intake-submit'),
]
