from django.apps import AppConfig


class LoginConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'login'

    def ready(self):
        """
        Importa os sinais de auditoria de login/logout quando a aplicação estiver pronta.
        """
        import login.signals  # noqa: F401
