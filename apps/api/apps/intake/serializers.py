"""
Intake serializers.
"""
from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from apps.intake.models import IntakeSubmission, IntakeTemplate


class IntakeTemplateSerializer(serializers.ModelSerializer):
    """Template with its field list decoded through the typed schema."""

    class Meta:
        model = IntakeTemplate
        fields = ['id', 'name', 'description', 'is_active', 'created_at']
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['fields'] = [f.to_dict() for f in instance.fields]
        return data


class IntakeTemplateCreateSerializer(serializers.Serializer):
    """
    POST /api/v1/intake/templates/

    `fields` is checked by the template engine, not here.
    """
    name = serializers.CharField()
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    is_active = serializers.BooleanField(required=False, default=True)
    fields = serializers.JSONField()


class IntakeSubmissionSerializer(serializers.ModelSerializer):
    appointment_id = serializers.UUIDField(read_only=True)
    template_id = serializers.UUIDField(read_only=True)
    client = UserSummarySerializer(read_only=True)

    class Meta:
        model = IntakeSubmission
        fields = [
            'id',
            'appointment_id',
            'template_id',
            'client',
            'answers',
            'submitted_at',
        ]
        read_only_fields = fields


class IntakeSubmitSerializer(serializers.Serializer):
    """POST /api/v1/intake/submit/"""
    appointment_id = serializers.CharField()
    template_id = serializers.CharField()
    answers = serializers.DictField()
