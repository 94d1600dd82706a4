"""
API endpoints for the collections, cultures and expositions.
Reads are public; writes need an authenticated session. Custody commands
answer with {"<entity>": {...}, "events": [...]}.
"""
from django.db.models import Q
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.museum.enums import CustodyState
from apps.museum.exceptions import CommandValidationError
from apps.museum.models import Artefact, Culture, Exposition
from apps.museum.serializers import (
    ArtefactSerializer, ArtefactCreateSerializer, ArtefactWriteSerializer,
    CultureSerializer, CultureWriteSerializer,
    ExpositionSerializer, ExpositionWriteSerializer,
    LocationEventSerializer, LocationChangeSerializer,
    AddVisitorsSerializer, AdmitArtefactsSerializer,
)
from apps.museum import services


# ══════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════

class MuseumPagination(PageNumberPagination):
    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100


def _paginated(request, queryset, serializer_class):
    paginator = MuseumPagination()
    page = paginator.paginate_queryset(queryset, request)
    data = serializer_class(page, many=True).data
    return paginator.get_paginated_response(data)


def _command_response(key, data, events, http_status=status.HTTP_200_OK):
    return Response(
        {
            key: data,
            'events': LocationEventSerializer(events, many=True).data,
        },
        status=http_status,
    )


def _get_artefact(pk):
    try:
        return Artefact.objects.select_related('culture').get(pk=pk)
    except Artefact.DoesNotExist:
        raise NotFound(f'Artefact {pk} not found.')


def _get_culture(pk):
    try:
        return Culture.objects.get(pk=pk)
    except Culture.DoesNotExist:
        raise NotFound(f'Culture {pk} not found.')


def _get_exposition(pk):
    try:
        return Exposition.objects.get(pk=pk)
    except Exposition.DoesNotExist:
        raise NotFound(f'Exposition {pk} not found.')


def _required_param(request, name):
    value = request.query_params.get(name)
    if value is None or not value.strip():
        raise CommandValidationError(f'The {name} parameter is required.')
    return value


def _year_range(request):
    """start_year / end_year query params as ints."""
    try:
        start = int(_required_param(request, 'start_year'))
        end = int(_required_param(request, 'end_year'))
    except ValueError:
        raise CommandValidationError('start_year and end_year must be integers.')
    if start > end:
        start, end = end, start
    return start, end


def _years_overlap_filter(start, end):
    return (Q(start_year__gte=start, start_year__lte=end)
            | Q(end_year__gte=start, end_year__lte=end))


# ══════════════════════════════════════════════════
# COLLECTIONS  (/api/collections/)
# ══════════════════════════════════════════════════

class ArtefactListCreateView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        qs = Artefact.objects.select_related('culture').all()

        state = request.query_params.get('state')
        if state == CustodyState.EXPOSITION:
            qs = qs.filter(in_exposition=True)
        elif state == CustodyState.ROOM:
            qs = qs.filter(on_permanent_display=True)
        elif state == CustodyState.RESERVES:
            qs = qs.filter(in_exposition=False, on_permanent_display=False)

        return _paginated(request, qs, ArtefactSerializer)

    def post(self, request):
        ser = ArtefactCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        artefact = services.create_artefact(ser.validated_data)
        return Response(ArtefactSerializer(artefact).data,
                        status=status.HTTP_201_CREATED)


class ArtefactSearchView(APIView):
    """name, cultural phase, type or material containing ?criteria=."""
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        criteria = _required_param(request, 'criteria')
        qs = Artefact.objects.select_related('culture').filter(
            Q(name__icontains=criteria)
            | Q(cultural_phase__icontains=criteria)
            | Q(object_type__icontains=criteria)
            | Q(material__icontains=criteria)
        )
        return Response(ArtefactSerializer(qs, many=True).data)


class ArtefactDatesView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        start, end = _year_range(request)
        qs = Artefact.objects.select_related('culture').filter(
            _years_overlap_filter(start, end))
        return Response(ArtefactSerializer(qs, many=True).data)


class ArtefactDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, pk):
        artefact = _get_artefact(pk)
        return Response(ArtefactSerializer(artefact).data)

    def put(self, request, pk):
        artefact = _get_artefact(pk)
        ser = ArtefactWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        artefact = services.update_artefact(artefact, ser.validated_data)
        return Response(ArtefactSerializer(artefact).data)

    def patch(self, request, pk):
        """Move: ?room=<code>|reserves|off expo, in the query string or the body."""
        artefact = _get_artefact(pk)
        body = request.data if isinstance(request.data, dict) else {}
        payload = {
            'room': request.query_params.get('room', body.get('room')),
        }
        destination = request.query_params.get(
            'destination', body.get('destination'))
        if destination is not None:
            payload['destination'] = destination
        ser = LocationChangeSerializer(data=payload)
        ser.is_valid(raise_exception=True)
        artefact, events = services.change_artefact_location(
            artefact,
            ser.validated_data['room'],
            request.user,
            destination=ser.validated_data.get('destination') or None,
        )
        return _command_response(
            'artefact', ArtefactSerializer(artefact).data, events)

    def delete(self, request, pk):
        artefact = _get_artefact(pk)
        services.delete_artefact(artefact)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ArtefactHistoryView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, pk):
        artefact = _get_artefact(pk)
        events = artefact.location_events.select_related('exposition').all()
        return _paginated(request, events, LocationEventSerializer)


# ══════════════════════════════════════════════════
# CULTURES  (/api/culture/)
# ══════════════════════════════════════════════════

class CultureListCreateView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        qs = Culture.objects.order_by('start_year', 'name')
        return Response(CultureSerializer(qs, many=True).data)

    def post(self, request):
        ser = CultureWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        culture = ser.save()
        return Response(CultureSerializer(culture).data,
                        status=status.HTTP_201_CREATED)


class CultureSearchView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        name = _required_param(request, 'name')
        qs = Culture.objects.filter(name__icontains=name)
        return Response(CultureSerializer(qs, many=True).data)


class CultureDatesView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        start, end = _year_range(request)
        qs = Culture.objects.filter(_years_overlap_filter(start, end))
        return Response(CultureSerializer(qs, many=True).data)


class CultureDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, pk):
        return Response(CultureSerializer(_get_culture(pk)).data)

    def put(self, request, pk):
        culture = _get_culture(pk)
        ser = CultureWriteSerializer(culture, data=request.data)
        ser.is_valid(raise_exception=True)
        culture = ser.save()
        return Response(CultureSerializer(culture).data)

    def delete(self, request, pk):
        # Artefacts keep existing, their culture is cleared (SET_NULL)
        _get_culture(pk).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class CultureArtefactsView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, pk):
        culture = _get_culture(pk)
        qs = culture.artefacts.select_related('culture').all()
        return _paginated(request, qs, ArtefactSerializer)


# ══════════════════════════════════════════════════
# EXPOSITIONS  (/api/expo/)
# ══════════════════════════════════════════════════

class ExpositionListCreateView(APIView):
    """Running expositions, most visited first."""
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        today = timezone.localdate()
        qs = Exposition.objects.filter(
            Q(end_date__isnull=True) | Q(end_date__gte=today)
        ).order_by('-visitor_count', 'title')
        return _paginated(request, qs, ExpositionSerializer)

    def post(self, request):
        ser = ExpositionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        exposition = services.create_exposition(ser.validated_data)
        return Response(ExpositionSerializer(exposition).data,
                        status=status.HTTP_201_CREATED)


class ExpositionArchiveView(APIView):
    """Ended expositions, most recent first."""
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        today = timezone.localdate()
        qs = Exposition.objects.filter(end_date__lt=today).order_by('-start_date', 'title')
        return _paginated(request, qs, ExpositionSerializer)


class ExpositionSearchView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request):
        name = _required_param(request, 'name')
        qs = Exposition.objects.filter(title__icontains=name)
        return Response(ExpositionSerializer(qs, many=True).data)


class ExpositionDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, pk):
        return Response(ExpositionSerializer(_get_exposition(pk)).data)

    def put(self, request, pk):
        exposition = _get_exposition(pk)
        ser = ExpositionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        exposition = services.update_exposition(
            exposition, ser.validated_data, request.user)
        return Response(ExpositionSerializer(exposition).data)

    def patch(self, request, pk):
        """Add visitors: {"number": n}. n <= 0 leaves the count unchanged."""
        exposition = _get_exposition(pk)
        data = request.data
        if isinstance(data, int):
            data = {'number': data}
        ser = AddVisitorsSerializer(data=data)
        ser.is_valid(raise_exception=True)
        exposition = services.add_visitors(exposition, ser.validated_data['number'])
        return Response(ExpositionSerializer(exposition).data)

    def delete(self, request, pk):
        exposition = _get_exposition(pk)
        events, stale = services.delete_exposition(exposition, request.user)
        return Response(
            {
                'events': LocationEventSerializer(events, many=True).data,
                'stale_identifiers': stale,
            },
            status=status.HTTP_200_OK,
        )


class AdmitArtefactsView(APIView):
    """Body: ["EG1000", ...] or {"identifiers": [...]}."""
    permission_classes = [IsAuthenticatedOrReadOnly]

    def patch(self, request, pk):
        exposition = _get_exposition(pk)
        data = request.data
        if isinstance(data, list):
            data = {'identifiers': data}
        ser = AdmitArtefactsSerializer(data=data)
        ser.is_valid(raise_exception=True)
        exposition, events = services.admit_artefacts(
            exposition, ser.validated_data['identifiers'], request.user)
        return _command_response(
            'exposition', ExpositionSerializer(exposition).data, events)


class EndExpositionView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def patch(self, request, pk):
        exposition = _get_exposition(pk)
        exposition, events = services.end_exposition(exposition, request.user)
        return _command_response(
            'exposition', ExpositionSerializer(exposition).data, events)
