from django.contrib import admin
from .models import Culture, Artefact, Exposition, LocationEvent


@admin.register(Culture)
class CultureAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'period_description', 'start_year', 'end_year')
    search_fields = ('name',)


@admin.register(Artefact)
class ArtefactAdmin(admin.ModelAdmin):
    list_display = ('identification', 'name', 'object_type', 'culture',
                    'location', 'on_permanent_display', 'in_exposition')
    search_fields = ('identification', 'name', 'cultural_phase', 'object_type', 'material')
    list_filter = ('on_permanent_display', 'in_exposition', 'culture')
    # Custody fields only move through the API commands
    readonly_fields = ('location', 'on_permanent_display', 'in_exposition',
                       'exposition', 'admitted_at')


@admin.register(Exposition)
class ExpositionAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'start_date', 'end_date', 'visitor_count')
    search_fields = ('title',)
    list_filter = ('end_date',)


@admin.register(LocationEvent)
class LocationEventAdmin(admin.ModelAdmin):
    list_display = ('event_id', 'artefact', 'event_type', 'from_location',
                    'to_location', 'emitted_by', 'created_at')
    search_fields = ('artefact__identification', 'emitted_by')
    list_filter = ('event_type',)
