from django.urls import path

from playback.consumers import PlayerConsumer

websocket_urlpatterns = [
    path("ws/player/<str:viewer_id>/", PlayerConsumer.as_asgi()),
]
