"""
Intake models: form templates and per-appointment submissions.
"""
import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.intake.fields import parse_fields


class IntakeTemplateQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)


class IntakeTemplate(models.Model):
    """
    Intake form definition.

    `fields_schema` holds the ordered field list as JSON; use `.fields`
    for the decoded, typed view. Templates are not edited once created;
    a changed form is a new template and the old one is deactivated.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    fields_schema = models.JSONField(default=list)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = IntakeTemplateQuerySet.as_manager()

    class Meta:
        db_table = 'intake_template'
        verbose_name = 'Intake Template'
        verbose_name_plural = 'Intake Templates'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['is_active', 'created_at'], name='idx_intake_template_active'),
        ]

    def __str__(self):
        return self.name

    @property
    def fields(self):
        return parse_fields(self.fields_schema)


class IntakeSubmission(models.Model):
    """
    One client's answers for one appointment.

    Unique per (appointment, client): resubmitting overwrites answers,
    template and submitted_at.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appointment = models.ForeignKey(
        'scheduling.Appointment',
        on_delete=models.CASCADE,
        related_name='intake_submissions'
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='intake_submissions'
    )
    template = models.ForeignKey(
        IntakeTemplate,
        on_delete=models.PROTECT,
        related_name='submissions'
    )
    answers = models.JSONField(default=dict)
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'intake_submission'
        verbose_name = 'Intake Submission'
        verbose_name_plural = 'Intake Submissions'
        ordering = ['-submitted_at']
        constraints = [
            models.UniqueConstraint(
                fields=['appointment', 'client'],
                name='uniq_intake_submission_appointment_client'
            ),
        ]

    def __str__(self):
        return f"Intake {self.appointment_id} ({self.submitted_at:%Y-%m-%d %H:%M})"
