from django.apps import AppConfig


class CandidaturasConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'candidaturas'
    verbose_name = 'Candidaturas'
