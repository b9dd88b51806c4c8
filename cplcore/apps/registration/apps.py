from django.apps import AppConfig


class RegistrationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cplcore.apps.registration"
    verbose_name = "Registration (Jugadores CPL)"
