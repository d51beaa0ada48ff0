from django.utils.deprecation import MiddlewareMixin


class JWTAuthCookieMiddleware(MiddlewareMixin):
    """
    Browser clients carry the access token in an httponly cookie set by the
    login view. Expose it as a bearer header for simplejwt, unless the client
    already sent one explicitly.
    """
    COOKIE_NAME = "access_token"

    def process_request(self, request):
        if request.META.get("HTTP_AUTHORIZATION"):
            return None
        token = request.COOKIES.get(self.COOKIE_NAME)
        if token:
            request.META["HTTP_AUTHORIZATION"] = f"Bearer {token}"
        return None
