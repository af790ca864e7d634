from django.contrib import admin
from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['starts_at', 'ends_at', 'practitioner', 'client', 'status', 'created_at']
    list_filter = ['status', 'starts_at']
    search_fields = ['client__email', 'client__last_name', 'practitioner__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['client', 'practitioner']
    date_hierarchy = 'starts_at'
