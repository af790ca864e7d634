"""
Scheduling API views.

Thin adapters: validate the payload shape, build the Principal, call the
service. Domain errors are rendered by the core exception handler.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import HasKnownRole
from apps.authz.principal import Principal
from apps.core.exceptions import invalid_input_from_serializer
from apps.scheduling import services
from apps.scheduling.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentTransitionSerializer,
    PublicAppointmentSerializer,
)


class PractitionerAvailabilityView(APIView):
    """
    GET /api/v1/practitioners/{practitioner_id}/availability/?date=YYYY-MM-DD

    Free slots for one practitioner on one day, ascending by start.
    Public: used by the booking UI before login.

    Response:
    [
        {"start": "2024-06-01T09:00:00+00:00", "end": "2024-06-01T09:30:00+00:00"},
        ...
    ]
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, practitioner_id):
        slots = services.AvailabilityService.get_availability(
            practitioner_id,
            request.query_params.get('date'),
        )
        return Response([slot.to_dict() for slot in slots])


class AppointmentViewSet(viewsets.ViewSet):
    """
    ViewSet for Appointment endpoints.

    Endpoints:
    - GET /api/v1/appointments/
    - POST /api/v1/appointments/
    - GET /api/v1/appointments/public/
    - GET /api/v1/appointments/{id}/
    - POST /api/v1/appointments/{id}/transition/

    Appointments are never deleted or edited in place; they move through
    the status lifecycle instead.
    """
    permission_classes = [HasKnownRole]

    def list(self, request):
        """
        Filters:
        - status: appointment status
        - date_from: YYYY-MM-DD, start on or after this day
        - date_to: YYYY-MM-DD, start on or before this day
        """
        principal = Principal.from_request(request)
        appointments = services.list_appointments(
            principal,
            status=request.query_params.get('status'),
            date_from=request.query_params.get('date_from'),
            date_to=request.query_params.get('date_to'),
        )
        return Response(AppointmentSerializer(appointments, many=True).data)

    def create(self, request):
        """
        Book an appointment (always created PENDING).

        Request body:
        {
            "practitioner_id": "...",
            "starts_at": "2024-06-01T10:00:00Z",
            "ends_at": "2024-06-01T10:30:00Z",
            "client_id": "..."  # required for practitioner/admin, ignored for clients
        }

        Returns:
            201: Appointment created
            400: Invalid input
            403: Not allowed to book this calendar
            409: Slot no longer available
        """
        principal = Principal.from_request(request)
        serializer = AppointmentCreateSerializer(data=request.data)
        if not serializer.is_valid():
            raise invalid_input_from_serializer(serializer)

        data = serializer.validated_data
        appointment = services.create_appointment(
            principal=principal,
            practitioner_id=data['practitioner_id'],
            starts_at=data['starts_at'],
            ends_at=data['ends_at'],
            client_id=data.get('client_id'),
        )
        return Response(
            AppointmentSerializer(appointment).data,
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        principal = Principal.from_request(request)
        appointment = services.get_appointment(pk, principal)
        return Response(AppointmentSerializer(appointment).data)

    @action(detail=True, methods=['post'], url_path='transition')
    def transition(self, request, pk=None):
        """
        Request body:
        {
            "status": "confirmed",
            "reason": "Client requested cancellation"  # optional, kept on cancel
        }

        Allowed transitions:
        - pending -> confirmed | cancelled
        - confirmed -> completed | cancelled
        """
        principal = Principal.from_request(request)
        serializer = AppointmentTransitionSerializer(data=request.data)
        if not serializer.is_valid():
            raise invalid_input_from_serializer(serializer)

        appointment = services.transition_appointment(
            pk,
            principal,
            serializer.validated_data['status'],
            reason=serializer.validated_data.get('reason') or None,
        )
        return Response(AppointmentSerializer(appointment).data)

    @action(
        detail=False,
        methods=['get'],
        url_path='public',
        permission_classes=[AllowAny],
        authentication_classes=[],
    )
    def public(self, request):
        """
        Next upcoming appointments (at most 10), soonest first.

        Public: practitioner and time only, never client details.
        """
        appointments = services.list_upcoming_appointments()
        return Response(PublicAppointmentSerializer(appointments, many=True).data)
