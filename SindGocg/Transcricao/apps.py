from django.apps import AppConfig


class TranscricaoConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Transcricao'
    verbose_name = 'Transcrição de Oitivas'
