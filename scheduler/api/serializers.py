from rest_framework import serializers

from ..config import DUE_CARDS_LIMIT, MAX_QUALITY, MIN_QUALITY

class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    card_id = serializers.UUIDField()
    quality = serializers.IntegerField(min_value=MIN_QUALITY, max_value=MAX_QUALITY)
    idempotency_key = serializers.CharField(max_length=64, required=False, allow_blank=True)

class DueQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)  # ISO-8601 date
    deck_id = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=500, default=DUE_CARDS_LIMIT)

class StatsQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)
    deck_id = serializers.UUIDField(required=False)

class ProgressQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)
