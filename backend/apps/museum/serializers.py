"""
Read + write serializers for artefacts, cultures and expositions.
An exposition's member list never nests the exposition again; an artefact
only exposes its exposition as an id.
"""
from rest_framework import serializers
from apps.museum.models import Artefact, Culture, Exposition, LocationEvent

# Path segments of the collection routes that sit next to the detail route
RESERVED_IDENTIFICATIONS = {'search', 'dates'}


# ──────────────────────────────────────────────────
# READ SERIALIZERS
# ──────────────────────────────────────────────────

class CultureSerializer(serializers.ModelSerializer):
    artefact_count = serializers.IntegerField(source='artefacts.count', read_only=True)

    class Meta:
        model = Culture
        fields = [
            'id', 'name', 'description', 'period_description',
            'culture_map', 'start_year', 'end_year', 'artefact_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'artefact_count', 'created_at', 'updated_at']


class CultureSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Culture
        fields = ['id', 'name', 'period_description', 'start_year', 'end_year']
        read_only_fields = fields


class ArtefactSerializer(serializers.ModelSerializer):
    culture = CultureSummarySerializer(read_only=True)
    custody_state = serializers.CharField(read_only=True)
    custody_state_display = serializers.CharField(
        source='custody_state.label', read_only=True)

    class Meta:
        model = Artefact
        fields = [
            'identification', 'name', 'object_description', 'object_type',
            'material', 'cultural_phase', 'period_description',
            'start_year', 'end_year', 'date_of_entry', 'image_url',
            'culture', 'location', 'on_permanent_display', 'in_exposition',
            'exposition', 'admitted_at',
            'custody_state', 'custody_state_display',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ExpositionMemberSerializer(serializers.ModelSerializer):
    """Artefact as listed inside an exposition, without the back-reference."""

    class Meta:
        model = Artefact
        fields = [
            'identification', 'name', 'object_type', 'material',
            'location', 'image_url', 'admitted_at',
        ]
        read_only_fields = fields


class ExpositionSerializer(serializers.ModelSerializer):
    exposed_artefacts = ExpositionMemberSerializer(
        source='members', many=True, read_only=True)

    class Meta:
        model = Exposition
        fields = [
            'id', 'title', 'description', 'start_date', 'end_date',
            'image_url', 'visitor_count', 'exposed_artefacts',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class LocationEventSerializer(serializers.ModelSerializer):
    event_type_display = serializers.CharField(
        source='get_event_type_display', read_only=True)

    class Meta:
        model = LocationEvent
        fields = [
            'event_id', 'artefact', 'event_type', 'event_type_display',
            'from_location', 'to_location', 'exposition',
            'emitted_by', 'created_at',
        ]
        read_only_fields = fields


# ──────────────────────────────────────────────────
# WRITE SERIALIZERS
# ──────────────────────────────────────────────────

class ArtefactWriteSerializer(serializers.Serializer):
    """Descriptive fields. Custody state is only changed by the move commands."""
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    object_description = serializers.CharField(required=False, allow_blank=True)
    object_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    material = serializers.CharField(max_length=100, required=False, allow_blank=True)
    cultural_phase = serializers.CharField(max_length=255, required=False, allow_blank=True)
    period_description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    start_year = serializers.IntegerField(required=False, allow_null=True)
    end_year = serializers.IntegerField(required=False, allow_null=True)
    date_of_entry = serializers.DateField(required=False, allow_null=True)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    culture = serializers.PrimaryKeyRelatedField(
        queryset=Culture.objects.all(), required=False, allow_null=True)

    def validate(self, attrs):
        start, end = attrs.get('start_year'), attrs.get('end_year')
        if start is not None and end is not None and start > end:
            raise serializers.ValidationError('start_year must not be after end_year.')
        return attrs


class ArtefactCreateSerializer(ArtefactWriteSerializer):
    identification = serializers.CharField(max_length=50)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_identification(self, value):
        if value in RESERVED_IDENTIFICATIONS:
            raise serializers.ValidationError(f'{value} is reserved by the collection routes.')
        if '/' in value:
            raise serializers.ValidationError('An identification cannot contain a slash.')
        return value


class CultureWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Culture
        fields = [
            'name', 'description', 'period_description',
            'culture_map', 'start_year', 'end_year',
        ]


class ExpositionWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError('start_date must not be after end_date.')
        return attrs


class LocationChangeSerializer(serializers.Serializer):
    """room: a room code, 'reserves' or 'off expo'. destination: room after release."""
    room = serializers.CharField(max_length=255)
    destination = serializers.CharField(max_length=255, required=False, allow_blank=True)


class AddVisitorsSerializer(serializers.Serializer):
    number = serializers.IntegerField()


class AdmitArtefactsSerializer(serializers.Serializer):
    identifiers = serializers.ListField(
        child=serializers.CharField(max_length=50), allow_empty=False)
