"""
Intake API views.
"""
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import HasKnownRole, IsPractitionerOrAdmin
from apps.authz.principal import Principal
from apps.core.exceptions import invalid_input_from_serializer
from apps.intake import services
from apps.intake.serializers import (
    IntakeSubmissionSerializer,
    IntakeSubmitSerializer,
    IntakeTemplateCreateSerializer,
    IntakeTemplateSerializer,
)


class IntakeTemplateCreateView(APIView):
    """
    POST /api/v1/intake/templates/

    Request body:
    {
        "name": "General intake",
        "description": "optional",
        "is_active": true,
        "fields": [
            {"id": "consent", "label": "I consent", "type": "checkbox", "required": true},
            {"id": "goal", "label": "Goal", "type": "select", "options": ["a", "b"]}
        ]
    }
    """
    permission_classes = [HasKnownRole]

    def post(self, request):
        principal = Principal.from_request(request)
        serializer = IntakeTemplateCreateSerializer(data=request.data)
        if not serializer.is_valid():
            raise invalid_input_from_serializer(serializer, message='Invalid template input')

        data = serializer.validated_data
        template = services.create_template(
            principal,
            name=data['name'],
            fields=data['fields'],
            description=data.get('description'),
            is_active=data.get('is_active', True),
        )
        return Response(
            IntakeTemplateSerializer(template).data,
            status=status.HTTP_201_CREATED
        )


class ActiveIntakeTemplateListView(APIView):
    """
    GET /api/v1/intake/templates/active/

    Every active template, oldest first. Public.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        templates = services.list_active_templates()
        return Response(IntakeTemplateSerializer(templates, many=True).data)


class IntakeTemplateDeactivateView(APIView):
    """POST /api/v1/intake/templates/{template_id}/deactivate/"""
    permission_classes = [IsPractitionerOrAdmin]

    def post(self, request, template_id):
        principal = Principal.from_request(request)
        template = services.deactivate_template(principal, template_id)
        return Response(IntakeTemplateSerializer(template).data)


class AppointmentIntakeView(APIView):
    """
    GET /api/v1/intake/appointment/{appointment_id}/

    Response:
    {
        "appointment_id": "...",
        "template": {...},
        "submission": {...} | null
    }
    """
    permission_classes = [HasKnownRole]

    def get(self, request, appointment_id):
        principal = Principal.from_request(request)
        result = services.get_active_template_with_submission(appointment_id, principal)
        submission = result['submission']
        return Response({
            'appointment_id': str(result['appointment'].id),
            'template': IntakeTemplateSerializer(result['template']).data,
            'submission': IntakeSubmissionSerializer(submission).data if submission else None,
        })


class IntakeSubmitView(APIView):
    """
    POST /api/v1/intake/submit/

    Request body:
    {
        "appointment_id": "...",
        "template_id": "...",
        "answers": {"consent": true, "goal": "a"}
    }

    Creates or overwrites the submission for the appointment's client.

    Returns:
        201: Submission stored
        400: Invalid input or validation failed (with "fields")
        403: Not the appointment's client
        404: Unknown appointment or template
    """
    permission_classes = [HasKnownRole]

    def post(self, request):
        principal = Principal.from_request(request)
        serializer = IntakeSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            raise invalid_input_from_serializer(serializer, message='Invalid submission input')

        data = serializer.validated_data
        submission = services.submit_intake(
            data['appointment_id'],
            principal,
            data['template_id'],
            data['answers'],
        )
        return Response(
            IntakeSubmissionSerializer(submission).data,
            status=status.HTTP_201_CREATED
        )
