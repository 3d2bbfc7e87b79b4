"""
Routage de l'application `users`.

Chaque entrée précise la vue appelée, le type d'accès et la réponse.
"""

from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Demande d'accès (anonyme)
    # - GET: formulaire email
    # - POST: transmet l'email au webhook d'invitation puis redirige
    path('', views.register_view, name='register'),

    # Confirmation "vérifiez votre boîte mail" (anonyme), ?email=...
    path('check-email/', views.check_email_view, name='check_email'),

    # Connexion (anonyme), ?hint=... pré-remplit l'email, ?error=... affiche la raison
    path('login/', views.login_view, name='login'),

    # Création du mot de passe + nom après invitation (connecté)
    path('set-password/', views.set_password_view, name='set_password'),

    # Retour du fournisseur d'identité
    # - GET: code / token_hash+type (serveur) ou page de lecture du fragment
    # - session/: POST JSON des paramètres du fragment, réponse {redirect}
    path('auth/callback/', views.auth_callback, name='auth_callback'),
    path('auth/callback/session/', views.auth_callback_session, name='auth_callback_session'),

    # Déconnexion (POST attendu, GET redirige vers /login/)
    path('logout/', views.logout_view, name='logout'),
]
