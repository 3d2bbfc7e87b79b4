"""Définition des routes pour l'application `core`.

Routes principales:
- ``/dashboard/`` → tableau de bord protégé (vidéo + agent conversationnel).
"""

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # ``GET /dashboard/``: nécessite d'être connecté
    path('dashboard/', views.DashboardView.as_view(), name='dashboard'),
]
