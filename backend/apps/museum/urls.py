"""
URL registry for the museum app.
Mounted three times from config/urls.py, once per namespace:
collections (artefacts), culture, expo (expositions).
"""
from django.urls import path
from apps.museum.views import (
    ArtefactListCreateView,
    ArtefactSearchView,
    ArtefactDatesView,
    ArtefactDetailView,
    ArtefactHistoryView,
    CultureListCreateView,
    CultureSearchView,
    CultureDatesView,
    CultureDetailView,
    CultureArtefactsView,
    ExpositionListCreateView,
    ExpositionArchiveView,
    ExpositionSearchView,
    ExpositionDetailView,
    AdmitArtefactsView,
    EndExpositionView,
)

collections_patterns = ([
    path('', ArtefactListCreateView.as_view(), name='list'),
    path('search/', ArtefactSearchView.as_view(), name='search'),
    path('dates/', ArtefactDatesView.as_view(), name='dates'),
    path('<str:pk>/', ArtefactDetailView.as_view(), name='detail'),
    path('<str:pk>/history/', ArtefactHistoryView.as_view(), name='history'),
], 'collections')

culture_patterns = ([
    path('', CultureListCreateView.as_view(), name='list'),
    path('search/', CultureSearchView.as_view(), name='search'),
    path('dates/', CultureDatesView.as_view(), name='dates'),
    path('<int:pk>/', CultureDetailView.as_view(), name='detail'),
    path('<int:pk>/artefacts/', CultureArtefactsView.as_view(), name='artefacts'),
], 'culture')

expo_patterns = ([
    path('', ExpositionListCreateView.as_view(), name='list'),
    path('old/', ExpositionArchiveView.as_view(), name='old'),
    path('search/', ExpositionSearchView.as_view(), name='search'),
    path('<int:pk>/', ExpositionDetailView.as_view(), name='detail'),
    # Custody commands
    path('<int:pk>/artefacts/', AdmitArtefactsView.as_view(), name='admit-artefacts'),
    path('<int:pk>/end/', EndExpositionView.as_view(), name='end'),
], 'expo')
