"""URL routing for the item catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import ItemViewSet

router = SimpleRouter()
router.register(r"", ItemViewSet, basename="item")

urlpatterns = [
    path("", include(router.urls)),
]
