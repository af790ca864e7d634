"""
Authz URLs - current user and practitioner directory
"""
from django.urls import path

from .views import MeView, PublicPractitionerListView

urlpatterns = [
    path('me/', MeView.as_view(), name='me'),
    path('practitioners/public/', PublicPractitionerListView.as_view(), name='practitioner-public-list'),
]
