from django.contrib import admin
from .models import IntakeSubmission, IntakeTemplate


@admin.register(IntakeTemplate)
class IntakeTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at']


@admin.register(IntakeSubmission)
class IntakeSubmissionAdmin(admin.ModelAdmin):
    list_display = ['appointment', 'client', 'template', 'submitted_at']
    list_filter = ['template']
    readonly_fields = ['id', 'submitted_at']
    raw_id_fields = ['appointment', 'client', 'template']
