"""
URL routing for account endpoints.

The data store is injected by the root URLconf as the "storage" kwarg.
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("register", views.register, name="register"),
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),
    path("user", views.current_user, name="user"),
]
