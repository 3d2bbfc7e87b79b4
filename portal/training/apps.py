"""Configuration de l'application `training` (vidéo de formation et suivi d'engagement)."""

from django.apps import AppConfig


class TrainingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'training'
    verbose_name = 'Formation vidéo'
