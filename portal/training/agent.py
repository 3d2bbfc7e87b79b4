"""Liens vers l'agent conversationnel (ElevenLabs) et son QR code."""

from urllib.parse import quote

from django.conf import settings

AGENT_BASE_URL = 'https://elevenlabs.io/app/talk-to'
QR_BASE_URL = 'https://api.qrserver.com/v1/create-qr-code/'
QR_SIZE = 160

# Caractères laissés intacts par encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value):
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def build_agent_links(email):
    """Construit l'URL de conversation et l'URL du QR code pour `email`.

    Retour:
    - dict {agent_url, qr_url}, ou None si aucun agent n'est configuré.
    """
    agent_id = settings.ELEVENLABS_AGENT_ID
    if not agent_id:
        return None

    agent_url = (
        f"{AGENT_BASE_URL}"
        f"?agent_id={agent_id}"
        f"&conversation_signature={settings.ELEVENLABS_CONVERSATION_SIGNATURE}"
        f"&var_hubspot_email={encode_uri_component(email)}"
    )
    qr_url = (
        f"{QR_BASE_URL}?size={QR_SIZE}x{QR_SIZE}&margin=10"
        f"&data={encode_uri_component(agent_url)}"
    )
    return {'agent_url': agent_url, 'qr_url': qr_url}
