"""
URL routing for menu and order API endpoints.

Ids are captured as strings so malformed ids get a 400 instead of a 404.
The data store is injected by the root URLconf as the "storage" kwarg.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    # Menu endpoints
    path("menu", views.menu_collection, name="menu"),
    path("menu/<str:item_id>", views.menu_item_resource, name="menu_item"),
    # Order endpoints
    path("orders", views.order_collection, name="orders"),
    path("orders/<str:order_id>", views.order_detail, name="order_detail"),
    path(
        "orders/<str:order_id>/status",
        views.update_order_status,
        name="order_status",
    ),
]
