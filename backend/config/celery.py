import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.base')
app = Celery('config')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'close-ended-expositions-daily': {
        'task': 'apps.museum.tasks.close_ended_expositions',
        'schedule': crontab(hour=2, minute=0),
    },
}
