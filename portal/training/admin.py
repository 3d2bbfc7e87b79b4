"""
Admin Django pour l'application `training`.

Consultation seule de la progression de visionnage par onglet.
"""

from django.contrib import admin

from .models import PlaybackState


@admin.register(PlaybackState)
class PlaybackStateAdmin(admin.ModelAdmin):
    list_display = ('user', 'session_id', 'playback_status', 'milestones', 'watched_seconds', 'updated_at')
    list_select_related = ('user',)
    search_fields = ('user__email', 'session_id')
    readonly_fields = ('user', 'session_id', 'state', 'created_at', 'updated_at')

    def has_add_permission(self, request):
        return False

    @admin.display(description="État")
    def playback_status(self, obj):
        return obj.state.get('state', 'idle')

    @admin.display(description="Paliers")
    def milestones(self, obj):
        return ', '.join(obj.tracked_milestones) or '-'
