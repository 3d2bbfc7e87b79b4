"""
Endpoints JSON de l'application `training`.

- `video_metadata`: proxy des métadonnées de la vidéo de formation (HubSpot).
- `track_milestone`: relais d'un palier de visionnage vers le CRM (best effort).
- `playback_events`: rejoue les événements du lecteur d'un onglet dans sa
  `PlaybackSession` et planifie le relais des paliers émis.

Toutes les vues exigent une session authentifiée (401 JSON sinon).
"""

import json
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.http import JsonResponse

from core.exceptions import NotConfigured, UpstreamUnavailable
from users.decorators import api_login_required
from .engagement import forward_milestone
from .hubspot import HubSpotClient
from .models import PlaybackState
from .progress import PlaybackSession
from .serializers import MilestoneEventSerializer, PlaybackBatchSerializer
from .tasks import dispatch_milestone

logger = logging.getLogger(__name__)


def _json_body(request):
    try:
        data = json.loads(request.body.decode('utf-8') or '{}')
    except (UnicodeDecodeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _method_not_allowed():
    return JsonResponse({'error': 'Method not allowed'}, status=405)


def _first(data, *keys):
    """Première valeur non vide parmi plusieurs clés (camelCase / snake_case)."""
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def reshape_file(file_data):
    """Files API v3 → {id, name, url}"""
    return {
        'id': str(file_data.get('id', '')),
        'name': file_data.get('name') or settings.TRAINING_VIDEO_TITLE,
        'url': _first(file_data, 'defaultHostingUrl', 'url'),
    }


def reshape_marketing_video(video_data):
    """Marketing Videos v3 → {id, title, playerEmbedUrl, streamingUrl, thumbnailUrl, url}"""
    embed_url = _first(video_data, 'playerEmbedUrl', 'player_embed_url')
    streaming_url = _first(video_data, 'streamingUrl', 'streaming_url')
    return {
        'id': str(video_data.get('id', '')),
        'title': video_data.get('title') or settings.TRAINING_VIDEO_TITLE,
        'playerEmbedUrl': embed_url,
        'streamingUrl': streaming_url,
        'thumbnailUrl': _first(video_data, 'thumbnailUrl', 'thumbnail_url'),
        'url': streaming_url or embed_url,
    }


@api_login_required
def video_metadata(request):
    if request.method != 'GET':
        return _method_not_allowed()

    source = settings.HUBSPOT_VIDEO_SOURCE
    video_id = settings.HUBSPOT_VIDEO_ID
    cache_key = f'training:video:{source}:{video_id}'
    cached = cache.get(cache_key)
    if cached:
        return JsonResponse(cached)

    try:
        client = HubSpotClient()
    except NotConfigured:
        logger.error("Métadonnées vidéo indisponibles: HUBSPOT_PRIVATE_APP_TOKEN non configuré")
        return JsonResponse({'error': 'Video service not configured'}, status=500)

    try:
        if source == 'marketing':
            data = reshape_marketing_video(client.get_marketing_video(video_id))
        else:
            data = reshape_file(client.get_file(video_id))
    except UpstreamUnavailable:
        # Détail déjà journalisé par le client, jamais renvoyé au navigateur
        return JsonResponse({'error': 'Failed to fetch video'}, status=502)

    if not data.get('url'):
        logger.error(f"Vidéo {video_id} ({source}) sans URL de lecture")
        return JsonResponse({'error': 'Video URL not available'}, status=502)

    cache.set(cache_key, data, settings.VIDEO_METADATA_CACHE_SECONDS)
    return JsonResponse(data)


@api_login_required
def track_milestone(request):
    """Relais d'un palier: répond toujours {ok: true, tracked} hors 401/400."""
    if request.method != 'POST':
        return _method_not_allowed()

    serializer = MilestoneEventSerializer(data=_json_body(request))
    if not serializer.is_valid():
        return JsonResponse({'error': 'Missing fields'}, status=400)

    data = serializer.validated_data
    percentage = data.get('percentage')
    if percentage is not None and float(percentage).is_integer():
        percentage = int(percentage)

    try:
        tracked = forward_milestone(
            data['email'],
            data['milestone'],
            percentage=percentage,
            watched_seconds=data.get('watchedSeconds'),
        )
    except Exception:
        # Le suivi ne doit jamais faire échouer le client
        logger.exception(f"Erreur inattendue lors du suivi du palier {data['milestone']}")
        tracked = False

    return JsonResponse({'ok': True, 'tracked': tracked})

@api_login_required
def playback_events(request):
    """Rejoue un lot d'événements du lecteur dans la session de lecture de l'onglet.

    Corps: {session: <id généré par onglet>, events: [{type, currentTime, duration}]}
    Réponse: {ok: true, emitted: [paliers émis par ce lot]}

    L'état est conservé en base (`PlaybackState`, une ligne par utilisateur et
    par onglet): un palier déjà signalé ne l'est plus jamais, quel que soit le
    processus qui traite le lot suivant.
    """
    if request.method != 'POST':
        return _method_not_allowed()

    serializer = PlaybackBatchSerializer(data=_json_body(request))
    if not serializer.is_valid():
        return JsonResponse({'error': 'Invalid playback events'}, status=400)

    with transaction.atomic():
        # Verrou de ligne: deux lots concurrents du même onglet sont rejoués l'un après l'autre
        record, _ = PlaybackState.objects.select_for_update().get_or_create(
            user=request.user,
            session_id=serializer.validated_data['session'],
        )
        if record.state:
            session = PlaybackSession.from_dict(record.state)
        else:
            session = PlaybackSession(request.user.email)

        emitted = []
        for event in serializer.validated_data['events']:
            emitted += session.handle(event['type'], event.get('currentTime'), event.get('duration'))

        record.state = session.to_dict()
        record.save(update_fields=['state', 'updated_at'])

    # Planification après enregistrement de l'état
    for event in emitted:
        dispatch_milestone(event)

    return JsonResponse({'ok': True, 'emitted': [event.milestone for event in emitted]})
