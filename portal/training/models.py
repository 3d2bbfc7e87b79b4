"""
Modèles de l'application `training`.

- PlaybackState: état persistant d'une `PlaybackSession` (un onglet d'un
  utilisateur). Les paliers déjà signalés et le temps regardé survivent aux
  redémarrages et sont partagés entre les processus.
"""

from django.conf import settings
from django.db import models


class PlaybackState(models.Model):
    """État sérialisé (`PlaybackSession.to_dict`) d'une session de lecture."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='playback_states',
        verbose_name="Utilisateur",
    )
    session_id = models.CharField(verbose_name="Identifiant de session (onglet)", max_length=64)
    state = models.JSONField(verbose_name="État de lecture", default=dict, blank=True)
    created_at = models.DateTimeField(verbose_name="Créé le", auto_now_add=True)
    updated_at = models.DateTimeField(verbose_name="Mis à jour le", auto_now=True, db_index=True)

    class Meta:
        verbose_name = "Session de lecture"
        verbose_name_plural = "Sessions de lecture"
        ordering = ['-updated_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'session_id'], name='unique_playback_session'),
        ]

    def __str__(self):
        return f"{self.user.email} / {self.session_id} ({self.state.get('state', 'idle')})"

    @property
    def tracked_milestones(self):
        return self.state.get('tracked', [])

    @property
    def watched_seconds(self):
        return round(float(self.state.get('accumulated', 0.0)), 1)
