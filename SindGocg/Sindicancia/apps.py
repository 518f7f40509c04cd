from django.apps import AppConfig


class SindicanciaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Sindicancia'
    verbose_name = 'Sindicâncias'
