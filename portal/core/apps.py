"""Configuration de l'application `core`."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Config de l'app `core` (tableau de bord et middlewares transverses)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Fonctionnalités de Base'
