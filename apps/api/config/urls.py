"""
URL configuration for the Clientio booking & intake API.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from apps.core.observability.health import HealthzView, ReadyzView

urlpatterns = [
    # Health checks (no auth required)
    path('healthz', HealthzView.as_view(), name='healthz'),
    path('readyz', ReadyzView.as_view(), name='readyz'),

    # Admin
    path('admin/', admin.site.urls),

    # API
    path('api/', include('apps.core.urls')),  # JWT token issuance
    path('api/v1/', include('apps.authz.urls')),  # Me, practitioner directory
    path('api/v1/', include('apps.scheduling.urls')),  # Availability, appointments
    path('api/v1/intake/', include('apps.intake.urls')),  # Intake templates & submissions

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
