"""
Vues de l'application `users`.

Pages d'accès au portail: demande d'invitation, confirmation d'envoi,
connexion, création du mot de passe, callback du fournisseur d'identité et
déconnexion. Toute l'authentification est déléguée au fournisseur; ces vues
ne font que mettre en forme les requêtes et choisir la redirection.
"""

import json
import logging
from functools import wraps
from urllib.parse import urlencode

from django.contrib import messages
from django.contrib.auth import authenticate
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_POST

from core.exceptions import NotConfigured, UpstreamUnavailable
from .forms import LoginForm, RegisterForm, SetPasswordForm
from .identity import IdentityClient, IdentityProviderError
from . import session as idp
from .tasks import notify_profile_completed_task
from .webhooks import ALREADY_REGISTERED, InviteRejected, request_invite

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."

# Raisons d'échec transmises à la page de connexion (?error=...)
INVITE_EXPIRED = 'invite_expired'
AUTH_FAILED = 'auth_failed'

LOGIN_ERROR_MESSAGES = {
    INVITE_EXPIRED: "Your invite link has expired. Request a new one below.",
    AUTH_FAILED: "We couldn't verify your link. Please sign in or request a new invite.",
}

PASSWORD_ERROR_MESSAGES = {
    'same_password': "Your new password must be different from your current password.",
    'weak_password': "Please choose a stronger password.",
}


# Mixin pour ajouter des en-têtes anti-cache aux CBV (Class-Based Views)
class NoCacheMixin:
    """Mixin qui ajoute des en-têtes anti-cache à la réponse"""
    def dispatch(self, *args, **kwargs):
        response = super().dispatch(*args, **kwargs)
        response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        return response


# Décorateur pour ajouter des en-têtes anti-cache aux FBV (Function-Based Views)
def never_cache_view(view_func):
    """Décorateur qui ajoute des en-têtes anti-cache à la réponse"""
    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        response = view_func(request, *args, **kwargs)
        response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        return response
    return wrapped_view


def _safe_next(request, candidate, default=None):
    """N'accepte `next` que s'il pointe vers ce site (pas de redirection ouverte)."""
    default = default or reverse('core:dashboard')
    if candidate and url_has_allowed_host_and_scheme(
        candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return candidate
    return default


def _login_error_url(reason):
    return f"{reverse('users:login')}?{urlencode({'error': reason})}"


def _failure_reason(error_code):
    """`otp_expired` → lien d'invitation expiré; tout le reste → échec générique."""
    return INVITE_EXPIRED if error_code == 'otp_expired' else AUTH_FAILED


def _destination(request, otp_type, next_url=None):
    """Les invités passent d'abord par la création du mot de passe."""
    if otp_type == 'invite':
        return reverse('users:set_password')
    return _safe_next(request, next_url)


@never_cache_view
def register_view(request):
    """Page d'accueil publique: demande d'accès par email"""
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    form = RegisterForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        email = form.cleaned_data['email']
        try:
            outcome = request_invite(email)
        except NotConfigured:
            logger.error("Demande d'invitation impossible: N8N_INVITE_WEBHOOK non configuré")
            messages.error(request, GENERIC_ERROR)
        except InviteRejected as exc:
            messages.error(request, exc.user_message or GENERIC_ERROR)
        except UpstreamUnavailable:
            messages.error(request, GENERIC_ERROR)
        else:
            # 409: le compte existe déjà, on pré-remplit la connexion
            if outcome == ALREADY_REGISTERED:
                return redirect(f"{reverse('users:login')}?{urlencode({'hint': email})}")
            return redirect(f"{reverse('users:check_email')}?{urlencode({'email': email})}")

    return render(request, 'users/register.html', {'form': form})


def check_email_view(request):
    """Confirmation d'envoi de l'invitation"""
    return render(request, 'users/check_email.html', {'email': request.GET.get('email', '')})


@never_cache_view
def login_view(request):
    """Page de connexion"""
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            user = authenticate(
                request,
                email=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
            )
            # Seul le backend fournisseur renvoie une session exploitable
            idp_session = getattr(user, 'idp_session', None)
            if user is not None and idp_session:
                idp.establish_session(request, idp_session, user=user)
                return redirect(_safe_next(request, request.GET.get('next')))
            messages.error(request, "Invalid email or password.")
    else:
        form = LoginForm(initial={'email': request.GET.get('hint', '')})
        reason = request.GET.get('error')
        if reason:
            messages.error(request, LOGIN_ERROR_MESSAGES.get(reason, LOGIN_ERROR_MESSAGES[AUTH_FAILED]))

    return render(request, 'users/login.html', {'form': form})


@login_required
@never_cache_view
def set_password_view(request):
    """Création du mot de passe + nom après acceptation de l'invitation"""
    form = SetPasswordForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        tokens = idp.get_tokens(request) or {}
        try:
            IdentityClient().update_user(tokens.get('access_token'), password=form.cleaned_data['password'])
        except NotConfigured:
            logger.error("Mise à jour du mot de passe impossible: fournisseur non configuré")
            messages.error(request, GENERIC_ERROR)
        except IdentityProviderError as exc:
            messages.error(request, PASSWORD_ERROR_MESSAGES.get(exc.error_code, GENERIC_ERROR))
        else:
            user = request.user
            user.complete_profile(form.cleaned_data['first_name'], form.cleaned_data['last_name'])

            payload = {
                'email': user.email,
                'first_name': user.first_name,
                'last_name': user.last_name,
                'user_id': user.idp_user_id,
            }
            # Fire-and-forget: un broker indisponible ne doit pas bloquer l'utilisateur
            try:
                notify_profile_completed_task.delay(payload)
            except Exception as exc:
                logger.warning(f"Notification de profil non planifiée pour {user.email}: {exc}")

            return redirect('core:dashboard')

    return render(request, 'users/set_password.html', {'form': form})


@never_cache_view
def auth_callback(request):
    """Retour du fournisseur d'identité (lien d'invitation, lien magique).

    - ?error=...           → /login/?error=invite_expired|auth_failed
    - ?token_hash=&type=   → vérification OTP
    - ?code=... seul       → /login/?error=auth_failed
    - sinon                → page qui lit le fragment d'URL côté navigateur

    Un `code` PKCE ne peut être échangé qu'avec le `code_verifier` du navigateur
    qui a démarré le flux. Le portail ne démarre aucun flux PKCE (les liens
    d'invitation sont émis par le fournisseur): aucun verifier n'existe, le code
    est donc ignoré sans appel au fournisseur.
    """
    params = request.GET
    if params.get('error'):
        return redirect(_login_error_url(_failure_reason(params.get('error_code'))))

    code = params.get('code')
    token_hash = params.get('token_hash')
    otp_type = params.get('type')
    next_url = params.get('next')

    if not (token_hash and otp_type):
        if code:
            logger.warning("Callback reçu avec un code PKCE sans flux initié par le portail")
            return redirect(_login_error_url(AUTH_FAILED))
        return render(request, 'users/auth_callback.html')

    try:
        client = IdentityClient()
    except NotConfigured:
        logger.error("Callback reçu alors que le fournisseur d'identité n'est pas configuré")
        return redirect(_login_error_url(AUTH_FAILED))

    try:
        idp_session = client.verify_otp(token_hash, otp_type)
    except IdentityProviderError as exc:
        return redirect(_login_error_url(_failure_reason(exc.error_code)))

    idp.establish_session(request, idp_session)
    return redirect(_destination(request, otp_type, next_url))


@require_POST
@csrf_protect
def auth_callback_session(request):
    """Flux implicite: le navigateur poste les paramètres du fragment d'URL.

    Corps JSON: {error?, error_code?, access_token?, refresh_token?, type?}
    Réponse: {redirect: <url>} (toujours 200, la page suit l'URL renvoyée).
    """
    try:
        data = json.loads(request.body.decode('utf-8') or '{}')
    except (UnicodeDecodeError, ValueError):
        data = {}
    if not isinstance(data, dict):
        data = {}

    if data.get('error'):
        return JsonResponse({'redirect': _login_error_url(_failure_reason(data.get('error_code')))})

    access_token = data.get('access_token')
    refresh_token = data.get('refresh_token')
    if access_token and refresh_token:
        try:
            idp_session = IdentityClient().set_session(access_token, refresh_token)
        except (IdentityProviderError, NotConfigured) as exc:
            logger.warning(f"Jetons du fragment refusés: {exc}")
            return JsonResponse({'redirect': _login_error_url(AUTH_FAILED)})
        idp.establish_session(request, idp_session)
        return JsonResponse({'redirect': _destination(request, data.get('type'))})

    # Aucun paramètre reconnu: une session existe peut-être déjà
    if request.user.is_authenticated:
        return JsonResponse({'redirect': reverse('core:dashboard')})
    return JsonResponse({'redirect': _login_error_url(AUTH_FAILED)})


@login_required
@csrf_protect
@never_cache_view
def logout_view(request):
    if request.method == 'POST':
        tokens = idp.get_tokens(request) or {}
        # Révocation côté fournisseur: best effort, la session locale est vidée dans tous les cas
        if tokens.get('access_token'):
            try:
                IdentityClient().sign_out(tokens['access_token'])
            except (IdentityProviderError, NotConfigured) as exc:
                logger.warning(f"Déconnexion fournisseur en échec pour {request.user.email}: {exc}")

        idp.end_session(request)

        response = redirect('users:login')
        response['Cache-Control'] = 'no-cache, no-store, must-revalidate, max-age=0, private'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        response.delete_cookie('portal_sessionid')
        return response
    return redirect('users:login')
