from rest_framework import serializers

from providers.base import MediaKind

KIND_CHOICES = [kind.value for kind in MediaKind]


class ProgressUpdateSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=KIND_CHOICES)
    id = serializers.CharField(max_length=255)
    season = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    episode = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    # out-of-range values are clamped by the store, not rejected
    progress_seconds = serializers.FloatField()
    duration_seconds = serializers.FloatField(required=False, default=0)


class ProgressQuerySerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=KIND_CHOICES)
    id = serializers.CharField(max_length=255)
    season = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    episode = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class WatchlistToggleSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=KIND_CHOICES)
    id = serializers.CharField(max_length=255)
    title = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    poster_path = serializers.CharField(
        max_length=500, required=False, allow_blank=True, allow_null=True, default=None
    )
