from django.urls import path

from .views import continue_watching_view, progress_view, watchlist_view

urlpatterns = [
    path("progress/", progress_view),
    path("continue-watching/", continue_watching_view),
    path("watchlist/", watchlist_view),
]
