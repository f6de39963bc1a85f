from django.urls import path
from .views import (
    CardsView,
    CardDetailView,
    NewQueueView,
    MoveToTopView,
    ReviewQueueView,
    SessionsView,
    RatingsView,
    StatsView,
    StreakView,
    ConsistencyView,
)

urlpatterns = [
    path("users/<uuid:user_id>/cards", CardsView.as_view(), name="cards"),
    path("users/<uuid:user_id>/cards/<uuid:card_id>", CardDetailView.as_view(), name="card-detail"),
    path("users/<uuid:user_id>/new-queue", NewQueueView.as_view(), name="new-queue"),
    path("users/<uuid:user_id>/new-queue/move-to-top", MoveToTopView.as_view(), name="move-to-top"),
    path("users/<uuid:user_id>/review-queue", ReviewQueueView.as_view(), name="review-queue"),
    path("users/<uuid:user_id>/sessions", SessionsView.as_view(), name="sessions"),
    path(
        "users/<uuid:user_id>/sessions/<uuid:session_id>/ratings",
        RatingsView.as_view(),
        name="ratings",
    ),
    path("users/<uuid:user_id>/stats", StatsView.as_view(), name="stats"),
    path("users/<uuid:user_id>/streak", StreakView.as_view(), name="streak"),
    path("users/<uuid:user_id>/consistency", ConsistencyView.as_view(), name="consistency"),
]
