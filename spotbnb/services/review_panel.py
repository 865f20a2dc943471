"""What the review section of a spot page shows to a given viewer.

Pure functions over plain values so the branching can be tested without a
database or a browser.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ReviewPanelState(str, Enum):
    not_logged_in = "NotLoggedIn"
    owner = "Owner"
    has_review = "HasReview"
    can_review = "CanReview"


class _Authored(Protocol):
    id: int
    user_id: int


LOGIN_PROMPT = "Log in to create a Review"
CREATE_REVIEW = "Create Review"
DELETE_REVIEW = "Delete Review"
NO_RATINGS_LABEL = "New"


@dataclass(frozen=True)
class ReviewPanel:
    state: ReviewPanelState
    action: str | None
    prompt: str | None
    rating_label: str
    num_reviews: int
    review_id: int | None


def find_viewer_review(viewer_id: int | None, reviews: Iterable[_Authored]) -> _Authored | None:
    if viewer_id is None:
        return None
    return next((r for r in reviews if r.user_id == viewer_id), None)


def review_panel_state(viewer_id: int | None, spot_owner_id: int, reviews: Iterable[_Authored]) -> ReviewPanelState:
    if viewer_id is None:
        return ReviewPanelState.not_logged_in
    if viewer_id == spot_owner_id:
        return ReviewPanelState.owner
    if find_viewer_review(viewer_id, reviews) is not None:
        return ReviewPanelState.has_review
    return ReviewPanelState.can_review


def rating_summary(avg_rating: float | None, num_reviews: int) -> str:
    """``"New"`` until the first review, then e.g. ``"4.5 · 2 reviews"``."""
    if avg_rating is None or num_reviews <= 0:
        return NO_RATINGS_LABEL
    noun = "review" if num_reviews == 1 else "reviews"
    return f"{avg_rating:.1f} · {num_reviews} {noun}"


def build_review_panel(
    *,
    viewer_id: int | None,
    spot_owner_id: int,
    reviews: list[_Authored],
    avg_rating: float | None,
) -> ReviewPanel:
    state = review_panel_state(viewer_id, spot_owner_id, reviews)
    own = find_viewer_review(viewer_id, reviews) if state is ReviewPanelState.has_review else None

    action = {
        ReviewPanelState.has_review: DELETE_REVIEW,
        ReviewPanelState.can_review: CREATE_REVIEW,
    }.get(state)

    return ReviewPanel(
        state=state,
        action=action,
        prompt=LOGIN_PROMPT if state is ReviewPanelState.not_logged_in else None,
        rating_label=rating_summary(avg_rating, len(reviews)),
        num_reviews=len(reviews),
        review_id=own.id if own is not None else None,
    )
