"""
Scheduling serializers.

Request serializers only shape the payload; parsing of ids and instants
and every business rule happen in the services.
"""
from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from apps.scheduling.models import Appointment, AppointmentStatusChoices


class AppointmentSerializer(serializers.ModelSerializer):
    """
    Appointment representation for list, detail and write responses.
    Client and practitioner are embedded as {id, name, email}.
    """
    client = UserSummarySerializer(read_only=True)
    practitioner = UserSummarySerializer(read_only=True)
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = [
            'id',
            'practitioner',
            'client',
            'starts_at',
            'ends_at',
            'status',
            'cancellation_reason',
            'allowed_transitions',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_allowed_transitions(self, obj):
        return obj.allowed_transitions()


class PublicAppointmentSerializer(serializers.ModelSerializer):
    """Upcoming appointment as shown on the public listing. No client details."""
    practitioner = UserSummarySerializer(read_only=True)

    class Meta:
        model = Appointment
        fields = ['id', 'practitioner', 'starts_at', 'ends_at', 'status']
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    """
    POST /api/v1/appointments/

    Instants are kept as raw strings here; the booking service reads naive
    values in the clinic time zone.
    """
    practitioner_id = serializers.CharField()
    starts_at = serializers.CharField()
    ends_at = serializers.CharField()
    client_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class AppointmentTransitionSerializer(serializers.Serializer):
    """POST /api/v1/appointments/{id}/transition/"""
    status = serializers.ChoiceField(choices=AppointmentStatusChoices.choices)
    reason = serializers.CharField(required=False, allow_null=True, allow_blank=True)
