"""
Scheduling URLs - availability and appointments.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import AppointmentViewSet, PractitionerAvailabilityView

router = DefaultRouter()
router.register(r'appointments', AppointmentViewSet, basename='appointment')

urlpatterns = [
    path(
        'practitioners/<uuid:practitioner_id>/availability/',
        PractitionerAvailabilityView.as_view(),
        name='practitioner-availability'
    ),
    path('', include(router.urls)),
]
