from django.apps import AppConfig


class ClearancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "freight_core.clearances"
    label = "clearances"
