import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('authz', '0001_initial'),
        ('scheduling', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='IntakeTemplate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('fields_schema', models.JSONField(default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Intake Template',
                'verbose_name_plural': 'Intake Templates',
                'db_table': 'intake_template',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='intaketemplate',
            index=models.Index(fields=['is_active', 'created_at'], name='idx_intake_template_active'),
        ),
        migrations.CreateModel(
            name='IntakeSubmission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('answers', models.JSONField(default=dict)),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('appointment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='intake_submissions', to='scheduling.appointment')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='intake_submissions', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='submissions', to='intake.intaketemplate')),
            ],
            options={
                'verbose_name': 'Intake Submission',
                'verbose_name_plural': 'Intake Submissions',
                'db_table': 'intake_submission',
                'ordering': ['-submitted_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='intakesubmission',
            constraint=models.UniqueConstraint(fields=('appointment', 'client'), name='uniq_intake_submission_appointment_client'),
        ),
    ]
