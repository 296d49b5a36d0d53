"""Catalog API views."""

from __future__ import annotations

from rest_framework import viewsets  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore

from .models import Asset, Service
from .permissions import IsAdminRoleOrReadOnly
from .serializers import AssetSerializer, ServiceSerializer


class AssetViewSet(viewsets.ModelViewSet):
    """Viewset for rentable assets."""

    queryset = Asset.objects.all()
    serializer_class = AssetSerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["status"]
    search_fields = ["code", "name"]
    ordering_fields = ["name", "daily_rate", "stock"]


class ServiceViewSet(viewsets.ModelViewSet):
    """Viewset for bookable services."""

    queryset = Service.objects.all()
    serializer_class = ServiceSerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["is_active"]
    search_fields = ["code", "name"]
    ordering_fields = ["name", "unit_rate"]
