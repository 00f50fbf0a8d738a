from django.apps import AppConfig


class OffensesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.offenses'
    label = 'offenses'
