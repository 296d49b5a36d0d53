"""Cart API views."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.interfaces.http import caller_from_request, result_response
from .application.aggregator import cart_aggregator
from .serializers import AddToCartSerializer, CartLineSerializer, UpdateCartLineSerializer


def _line_id(pk) -> int:
    try:
        return int(pk)
    except (TypeError, ValueError):
        raise NotFound("Cart line not found")


def _cart_payload(lines) -> dict:
    return {
        "lines": CartLineSerializer(lines, many=True).data,
        "total": str(sum((line.price for line in lines), Decimal("0"))),
    }


class CartViewSet(viewsets.ViewSet):
    """The caller's own cart; other users' lines are invisible."""

    permission_classes = [IsAuthenticated]

    def list(self, request):  # type: ignore
        result = cart_aggregator.lines(caller_from_request(request))
        return result_response(result, _cart_payload)

    def create(self, request):  # type: ignore
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = cart_aggregator.add(
            caller_from_request(request),
            data["kind"],
            data["item_id"],
            data["qty"],
        )
        return result_response(
            result,
            lambda line: CartLineSerializer(line).data,
            success_status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = UpdateCartLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = cart_aggregator.update(
            caller_from_request(request),
            _line_id(pk),
            serializer.validated_data["qty"],
        )
        return result_response(result, lambda line: CartLineSerializer(line).data)

    def destroy(self, request, pk=None):  # type: ignore
        result = cart_aggregator.remove(caller_from_request(request), _line_id(pk))
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["delete"])
    def clear(self, request):  # type: ignore
        result = cart_aggregator.clear(caller_from_request(request))
        return result_response(result, lambda deleted: {"deleted": deleted})
