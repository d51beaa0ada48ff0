import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class InvalidInput(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input data."
    default_code = "invalid_input"


class InsufficientInventory(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient inventory."
    default_code = "insufficient_inventory"


class EmptyCart(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cart is empty."
    default_code = "empty_cart"


class PaymentAuthFailed(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "Payment authorization failed."
    default_code = "payment_auth_failed"


class SignatureInvalid(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid signature."
    default_code = "signature_invalid"


def api_exception_handler(exc, context):
    """
    Render every error as {"error": <kind>, "detail": <message>}.

    Anything DRF does not recognise is logged and turned into a bare 500 so
    internals never reach the client.
    """
    if isinstance(exc, Http404):
        exc = NotFound()

    if isinstance(exc, ValidationError):
        response = exception_handler(exc, context)
        response.data = {
            "error": InvalidInput.default_code,
            "detail": str(InvalidInput.default_detail),
            "details": exc.detail,
        }
        return response

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "view")
        return Response(
            {"error": "server_error", "detail": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = exc.detail
    if isinstance(detail, (list, dict)):
        response.data = {"error": exc.default_code, "detail": str(exc.default_detail), "details": detail}
    else:
        response.data = {"error": getattr(detail, "code", None) or exc.default_code, "detail": str(detail)}
    return response
