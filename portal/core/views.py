"""
Vues de l'application `core`.

Ce module contient :
- DashboardView: tableau de bord protégé. Il affiche le conteneur du lecteur
  vidéo (monté par `training/js/playback.js`), la carte de l'agent
  conversationnel et le bouton de déconnexion.
"""

from django.conf import settings
from django.contrib.auth.mixins import LoginRequiredMixin
from django.shortcuts import render
from django.urls import reverse
from django.views.generic import View

# Mixin défini dans `users.views` qui ajoute des en-têtes anti-cache
from users.views import NoCacheMixin
from training.agent import build_agent_links


class DashboardView(LoginRequiredMixin, NoCacheMixin, View):
    """Affiche le tableau de bord.

    Hérite de:
    - LoginRequiredMixin: impose l'authentification.
    - NoCacheMixin: évite d'afficher une page périmée après déconnexion.
    """

    template_name = 'core/dashboard.html'
    login_url = '/login/'

    def get(self, request):
        context = {
            'video_title': settings.TRAINING_VIDEO_TITLE,
            # Carte masquée si aucun agent n'est configuré
            'agent': build_agent_links(request.user.email),
            # URLs lues par le script du lecteur (attributs data-*)
            'video_endpoint': reverse('training:video_metadata'),
            'playback_endpoint': reverse('training:playback_events'),
        }
        return render(request, self.template_name, context)
