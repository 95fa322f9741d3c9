from django.urls import include, path

urlpatterns = [
    path("api/providers/", include("providers.urls")),
    path("api/viewers/<str:viewer_id>/", include("history.urls")),
    path("api/catalog/", include("catalog.urls")),
]
