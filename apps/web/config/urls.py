"""
URL configuration for Milestar ordering.

A single RestaurantStore is shared by every API view through the "storage"
kwarg, so tests and alternative deployments can swap the store in one place.
"""

from django.contrib import admin
from django.urls import include, path

from apps.web.restaurant.storage import RestaurantStore

store = RestaurantStore()

urlpatterns = [
    path("admin/", admin.site.urls),
    # JSON API
    path("api/", include("apps.web.core.urls"), {"storage": store}),
    path("api/", include("apps.web.restaurant.urls"), {"storage": store}),
]
