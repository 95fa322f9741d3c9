from django.urls import path

from .views import search_view, trending_view

urlpatterns = [
    path("search/", search_view),
    path("trending/<str:kind>/", trending_view),
]
