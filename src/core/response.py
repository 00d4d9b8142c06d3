"""Envelope helpers and base view classes.

Every JSON body produced by the API has the shape
``{"data": <payload or null>, "errors": [<messages>]}``.
"""

from typing import Any, Iterable

from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet, ModelViewSet


def api_response(data: Any, status: int = 200) -> Response:
    """Wrap a successful payload in the envelope."""

    return Response({"data": data, "errors": []}, status=status)


def api_error(errors: Iterable[Any], status: int) -> Response:
    """Wrap error messages in the envelope with ``data`` set to null."""

    return Response({"data": None, "errors": list(errors)}, status=status)


def is_enveloped(payload: Any) -> bool:
    return isinstance(payload, dict) and set(payload) == {"data", "errors"}


class EnvelopeMixin:
    """Wrap successful viewset/APIView responses that are not yet enveloped.

    Error responses are shaped by ``core.exceptions.custom_exception_handler``
    and 204 responses keep an empty body.
    """

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore[override]
        data = getattr(response, "data", None)
        if response.status_code < 400 and response.status_code != 204 and not is_enveloped(data):
            response.data = {"data": data, "errors": []}
        return super().finalize_response(request, response, *args, **kwargs)  # type: ignore[attr-defined]


class BaseAPIView(EnvelopeMixin, APIView):
    """APIView answering in the envelope."""


class BaseViewSet(EnvelopeMixin, ModelViewSet):
    """ModelViewSet answering in the envelope."""


class BaseGenericViewSet(EnvelopeMixin, GenericViewSet):
    """GenericViewSet for viewsets that pick their own CRUD mixins."""


__all__ = [
    "BaseAPIView",
    "BaseGenericViewSet",
    "BaseViewSet",
    "EnvelopeMixin",
    "api_error",
    "api_response",
]
