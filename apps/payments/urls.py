"""URL routing for payments."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import GatewayNotificationView, PaymentViewSet

router = DefaultRouter()
router.register(r"", PaymentViewSet, basename="payment")

urlpatterns = [
    path("notification/", GatewayNotificationView.as_view(), name="payment-notification"),
    path("", include(router.urls)),
]
