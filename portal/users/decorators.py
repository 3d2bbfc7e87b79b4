"""Décorateurs d'accès pour les endpoints JSON."""

from functools import wraps

from django.http import JsonResponse


def api_login_required(view_func):
    """Comme `login_required`, mais répond 401 en JSON au lieu de rediriger.

    Les appels `fetch()` du navigateur n'ont que faire d'une redirection vers
    la page de connexion.
    """
    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Unauthorized'}, status=401)
        return view_func(request, *args, **kwargs)
    return wrapped_view
