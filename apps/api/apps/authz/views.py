"""
Authz views: current user profile and public practitioner directory.
"""
from rest_framework import generics
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.models import User
from apps.authz.permissions import HasKnownRole
from apps.authz.principal import Principal
from apps.authz.serializers import MeSerializer, UserSummarySerializer


class MeView(APIView):
    """
    GET /api/v1/me/
    Returns the authenticated user's profile.
    """
    permission_classes = [HasKnownRole]

    def get(self, request):
        Principal.from_request(request)
        return Response(MeSerializer(request.user).data)


class PublicPractitionerListView(generics.ListAPIView):
    """
    GET /api/v1/practitioners/public/

    Practitioner directory for the booking UI (no authentication).
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = UserSummarySerializer
    pagination_class = None

    def get_queryset(self):
        return User.objects.practitioners().order_by('first_name', 'last_name')
