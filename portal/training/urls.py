"""
Routage de l'application `training` (monté sous `/api/`).

Toutes les routes exigent une session authentifiée et répondent en JSON.
"""

from django.urls import path
from . import views

app_name = 'training'

urlpatterns = [
    # GET: métadonnées de la vidéo {id, url|playerEmbedUrl, name|title, ...}
    # 401 non connecté, 500 non configuré, 502 erreur HubSpot
    path('hubspot-video/', views.video_metadata, name='video_metadata'),

    # POST {email, milestone, percentage?, watchedSeconds?} → {ok: true, tracked}
    path('hubspot-track/', views.track_milestone, name='track_milestone'),

    # POST {session, events: [...]} → {ok: true, emitted: [...]}
    path('playback-events/', views.playback_events, name='playback_events'),
]
