from http.cookies import SimpleCookie

import jwt
from channels.db import database_sync_to_async
from django.conf import settings


# Take the JWT from cookies, verify it, attach the user to the socket
@database_sync_to_async
def get_user(user_id):
    from django.contrib.auth import get_user_model
    from django.contrib.auth.models import AnonymousUser

    User = get_user_model()
    try:
        return User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        return AnonymousUser()


def token_from_scope(scope):
    headers = dict(scope.get("headers", []))
    cookies = SimpleCookie()
    cookies.load(headers.get(b"cookie", b"").decode())
    morsel = cookies.get("access_token")
    return morsel.value if morsel else None


def user_id_from_token(token):
    """Return the user id carried by a valid access token, else None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.PyJWTError:
        return None
    # refresh tokens are signed with the same key
    if payload.get("token_type") != "access":
        return None
    return payload.get("user_id")


class JWTAuthMiddleware:
    def __init__(self, inner):
        self.inner = inner

    async def __call__(self, scope, receive, send):
        from django.contrib.auth.models import AnonymousUser

        scope = dict(scope)
        token = token_from_scope(scope)
        scope["user"] = AnonymousUser()

        user_id = user_id_from_token(token) if token else None
        if user_id is not None:
            scope["user"] = await get_user(user_id)

        return await self.inner(scope, receive, send)
