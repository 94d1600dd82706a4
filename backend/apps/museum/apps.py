from django.apps import AppConfig


class MuseumConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.museum'
    verbose_name = 'Museum collections'
