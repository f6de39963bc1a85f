from rest_framework import serializers

from ..domain.enums import INTERLEAVINGS, REVIEW_ORDERS


class AddCardSerializer(serializers.Serializer):
    card_id = serializers.UUIDField()


class MoveToTopSerializer(serializers.Serializer):
    card_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class ReviewQueueQuerySerializer(serializers.Serializer):
    until = serializers.DateField(required=False)


class SessionInSerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1)
    review_order = serializers.ChoiceField(choices=REVIEW_ORDERS, default="ordered")
    interleaving = serializers.ChoiceField(choices=INTERLEAVINGS, default="review-first")


class RatingInSerializer(serializers.Serializer):
    card_id = serializers.UUIDField()
    # Range is enforced by Rating.parse so bad values surface as invalid_rating
    rating = serializers.IntegerField()


class AsOfQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)


class ConsistencyQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):
        if attrs["start"] > attrs["end"]:
            raise serializers.ValidationError("start must not be after end")
        return attrs


class CardStateSerializer(serializers.Serializer):
    card_id = serializers.UUIDField()
    queue = serializers.IntegerField(allow_null=True)
    due = serializers.DateField(allow_null=True)
    ease_factor = serializers.FloatField()
    interval_days = serializers.IntegerField()
    repetitions = serializers.IntegerField()
    last_reviewed_at = serializers.DateTimeField(allow_null=True)
