"""
URL configuration for training_portal project.

Les pages d'authentification vivent à la racine (`/login/`, `/set-password/`,
`/auth/callback/`...), les proxys JSON sous `/api/`.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # Pages d'inscription/connexion + callback du fournisseur d'identité
    path('', include('users.urls')),

    # Tableau de bord (protégé)
    path('', include('core.urls')),

    # Proxys vidéo / suivi d'engagement
    path('api/', include('training.urls')),
]
