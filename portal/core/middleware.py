"""Middleware anti-cache appliqué à toutes les pages non statiques."""


class NoCacheMiddleware:
    """
    Ajoute des en-têtes anti-cache à toutes les réponses. Empêche le navigateur
    de réafficher le tableau de bord via le bouton retour après déconnexion.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if not request.path.startswith('/static/'):
            response['Cache-Control'] = 'no-cache, no-store, must-revalidate, max-age=0'
            response['Pragma'] = 'no-cache'
            response['Expires'] = '0'

        return response
