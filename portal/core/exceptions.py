"""Exceptions partagées pour les appels aux services tiers.

Classement:
- ``UpstreamUnavailable``: l'appel tiers a échoué (réseau, statut non-2xx,
  réponse inexploitable). Sur le chemin critique (auth, vidéo) on renvoie une
  erreur générique; sur la télémétrie on l'avale.
- ``NotConfigured``: jeton/URL absent de la configuration.
- ``SubjectNotFound``: le contact n'existe pas côté CRM (succès "doux").
"""


class UpstreamUnavailable(Exception):
    """Un service tiers n'a pas répondu correctement."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        # Corps brut conservé pour les logs uniquement, jamais renvoyé au client
        self.body = body


class NotConfigured(Exception):
    """Un jeton ou une URL de service tiers manque dans la configuration."""


class SubjectNotFound(Exception):
    """Le sujet (contact CRM) est introuvable."""
