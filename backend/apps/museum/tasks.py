from celery import shared_task
from django.utils import timezone
import logging

from .exceptions import ExpositionReleaseError
from .models import Artefact, Exposition
from . import services

logger = logging.getLogger(__name__)

CLOSER_ACTOR = 'SYSTEM:EXPOSITION_CLOSER'


@shared_task
def close_ended_expositions():
    """
    Runs daily via Celery Beat (2:00 AM).
    Ends every exposition whose end date has passed and that still holds
    artefacts, sending them back to the reserves. Returns the number of
    expositions closed.
    """
    logger.info("Starting close_ended_expositions task")

    today = timezone.localdate()
    exposition_ids = list(
        Artefact.objects.filter(
            in_exposition=True,
            exposition__end_date__lt=today,
        ).values_list('exposition_id', flat=True).distinct()
    )

    closed = 0
    for exposition in Exposition.objects.filter(pk__in=exposition_ids):
        try:
            _, events = services.end_exposition(exposition, CLOSER_ACTOR)
        except ExpositionReleaseError as exc:
            # Membership is cleared anyway, only the stale rows are reported
            logger.warning(
                f"Exposition {exposition.pk} closed with stale members: {exc.identifiers}"
            )
        else:
            logger.info(
                f"Exposition {exposition.pk} ended on {exposition.end_date}, "
                f"{len(events)} artefact(s) back in reserves"
            )
        closed += 1

    logger.info(f"Finished close_ended_expositions task, {closed} closed")
    return closed
