import os
# Daphne starts Django outside of manage.py.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "storefront.settings")

from django.core.asgi import get_asgi_application

# Load the app registry before importing anything that touches models.
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from order.routing import websocket_urlpatterns  # noqa: E402
from order.ws_middleware import JWTAuthMiddleware  # noqa: E402

application = ProtocolTypeRouter({
    "http": django_asgi_app,  # normal HTTP requests
    "websocket": JWTAuthMiddleware(URLRouter(websocket_urlpatterns)),
})
