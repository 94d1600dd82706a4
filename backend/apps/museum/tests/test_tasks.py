import pytest
import datetime
from django.utils import timezone

from apps.museum import services
from apps.museum.models import Artefact, LocationEvent
from apps.museum.tasks import close_ended_expositions, CLOSER_ACTOR
from apps.museum.tests.factories import create_artefact, create_exposition

@pytest.fixture
def ended_exposition():
    today = timezone.localdate()
    expo = create_exposition(
        title='Last Summer',
        start_date=today - datetime.timedelta(days=90),
        end_date=today - datetime.timedelta(days=1),
    )
    create_artefact(identification='EG1000')
    create_artefact(identification='EG1001')
    services.admit_artefacts(expo, ['EG1000', 'EG1001'], 'SYSTEM:TEST')
    return expo

@pytest.mark.django_db
def test_close_ended_expositions_nothing_to_do():
    create_exposition()
    assert close_ended_expositions() == 0
    assert LocationEvent.objects.count() == 0

@pytest.mark.django_db
def test_close_ended_expositions_releases_members(ended_exposition):
    assert close_ended_expositions() == 1
    assert ended_exposition.members == []
    for artefact in Artefact.objects.all():
        assert artefact.location == 'In reserves'
        assert not artefact.in_exposition
    released = LocationEvent.objects.filter(event_type='RELEASED')
    assert released.count() == 2
    assert set(released.values_list('emitted_by', flat=True)) == {CLOSER_ACTOR}

@pytest.mark.django_db
def test_close_ended_expositions_skips_running_ones(ended_exposition):
    running = create_exposition(title='Still Open')
    create_artefact(identification='EG2000')
    services.admit_artefacts(running, ['EG2000'], 'SYSTEM:TEST')

    assert close_ended_expositions() == 1
    assert [a.identification for a in running.members] == ['EG2000']

@pytest.mark.django_db
def test_close_ended_expositions_survives_stale_member(ended_exposition):
    create_artefact(identification='EG1002', exposition=ended_exposition)
    assert close_ended_expositions() == 1
    assert ended_exposition.members == []

@pytest.mark.django_db
def test_close_ended_expositions_runs_as_celery_task(ended_exposition):
    result = close_ended_expositions.delay()
    assert result.get() == 1
