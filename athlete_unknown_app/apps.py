from django.apps import AppConfig


class AthleteUnknownAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "athlete_unknown_app"
    verbose_name = "Athlete Unknown"
