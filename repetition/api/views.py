from dataclasses import asdict
import uuid

from django.utils import timezone
from rest_framework import views, status
from rest_framework.response import Response
import structlog

from ..domain.enums import RATING_LABELS, Rating
from ..domain.errors import RecordsNotFound
from ..services import activity, queue
from ..services.reviews import rate_card, start_session
from ..services.stats import queue_stats
from .serializers import (
    AddCardSerializer,
    AsOfQuerySerializer,
    CardStateSerializer,
    ConsistencyQuerySerializer,
    MoveToTopSerializer,
    RatingInSerializer,
    ReviewQueueQuerySerializer,
    SessionInSerializer,
)

base_logger = structlog.get_logger()


def _request_logger():
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()))


def _as_of(request):
    qs = AsOfQuerySerializer(data=request.query_params)
    qs.is_valid(raise_exception=True)
    return qs.validated_data.get("as_of") or timezone.localdate()


class CardsView(views.APIView):
    def post(self, request, user_id):
        logger = _request_logger()
        s = AddCardSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        state, created = queue.add_card(user_id, s.validated_data["card_id"])

        logger.info("add_card_api_response",
            user_id=str(user_id),
            card_id=str(state.card_id),
            queue=state.queue,
            created=created,
        )
        code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(CardStateSerializer(state).data, status=code)


class CardDetailView(views.APIView):
    def delete(self, request, user_id, card_id):
        removed = queue.remove_card(user_id, card_id)
        if not removed:
            raise RecordsNotFound("card not found", user_id=user_id, card_id=card_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class NewQueueView(views.APIView):
    def get(self, request, user_id):
        return Response({"user_id": str(user_id), "card_ids": queue.new_queue(user_id)})


class MoveToTopView(views.APIView):
    def post(self, request, user_id):
        logger = _request_logger()
        s = MoveToTopSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        card_ids = queue.move_to_top(user_id, s.validated_data["card_ids"])

        logger.info("move_to_top_api_response",
            user_id=str(user_id),
            moved=len(s.validated_data["card_ids"]),
            queue_size=len(card_ids),
        )
        return Response({"user_id": str(user_id), "card_ids": card_ids})


class ReviewQueueView(views.APIView):
    def get(self, request, user_id):
        qs = ReviewQueueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data.get("until")
        return Response({
            "user_id": str(user_id),
            "until": until.isoformat() if until else None,
            "card_ids": queue.review_queue(user_id, until),
        })


class SessionsView(views.APIView):
    def post(self, request, user_id):
        logger = _request_logger()
        s = SessionInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        options = dict(s.validated_data)
        as_of = options.pop("as_of", None)

        session, plan = start_session(user_id, as_of, **options)

        logger.info("session_api_response",
            user_id=str(user_id),
            session_id=str(session.id),
            card_count=len(plan.card_ids),
        )
        return Response(
            {
                "session_id": str(session.id),
                "as_of": session.as_of.isoformat(),
                "card_ids": plan.card_ids,
                "review_card_ids": plan.review_card_ids,
                "new_card_ids": plan.new_card_ids,
            },
            status=status.HTTP_201_CREATED,
        )


class RatingsView(views.APIView):
    def post(self, request, user_id, session_id):
        logger = _request_logger()
        s = RatingInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        card_id = s.validated_data["card_id"]

        state, counted = rate_card(
            session_id, card_id, s.validated_data["rating"], user_id=user_id
        )

        logger.info("rating_api_response",
            user_id=str(user_id),
            card_id=str(card_id),
            interval_days=state.interval_days,
            counted=counted,
        )
        return Response({
            **CardStateSerializer(state).data,
            "rating_label": RATING_LABELS[Rating(s.validated_data["rating"])],
            "counted": counted,
        })


class StatsView(views.APIView):
    def get(self, request, user_id):
        stats = queue_stats(user_id, _as_of(request))
        return Response(asdict(stats))


class StreakView(views.APIView):
    def get(self, request, user_id):
        as_of = _as_of(request)
        return Response({
            "user_id": str(user_id),
            "as_of": as_of.isoformat(),
            "streak": activity.current_streak(user_id, as_of),
        })


class ConsistencyView(views.APIView):
    def get(self, request, user_id):
        qs = ConsistencyQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        counts = activity.consistency_map(
            user_id, qs.validated_data["start"], qs.validated_data["end"]
        )
        return Response({
            "user_id": str(user_id),
            "counts": {day.isoformat(): count for day, count in counts.items()},
        })
