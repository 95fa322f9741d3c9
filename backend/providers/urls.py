from django.urls import path

from .views import list_providers_view, resolve_view

urlpatterns = [
    path("", list_providers_view),
    path("<str:provider_key>/resolve/", resolve_view),
]
