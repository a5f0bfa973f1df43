"""
Feedback Service for the gas calculator

Validates flame-rating submissions, hands them to the feedback store and
builds the newest-first read model with rating statistics.
"""

from typing import Iterable
from aws_lambda_powertools import Logger

from ..models.feedback import (
    MAX_RATING, MIN_RATING,
    EmptyComment, FeedbackAggregate, FeedbackEntry, FeedbackPersistError,
    FeedbackReadError, FeedbackStoreUnavailable, FeedbackSubmission,
    RatingOutOfRange, SubmissionState, SubmitResult,
)
from .feedback_store import FeedbackStore

logger = Logger()


def validate_submission(submission: FeedbackSubmission) -> tuple[int, str]:
    """
    Check a submission before anything is written.

    Rating is checked first: a missing rating (or 0, the "nothing selected"
    value) is rejected rather than defaulted.

    Returns:
        tuple[int, str]: The rating and the trimmed comment

    Raises:
        RatingOutOfRange: rating missing, not an integer, or outside 1..5
        EmptyComment: comment missing or blank after trimming
    """
    rating = submission.rating
    # bool is an int subclass; floats and numeric strings are not ratings
    if type(rating) is not int or not MIN_RATING <= rating <= MAX_RATING:
        raise RatingOutOfRange(rating)

    comment = (submission.comment or "").strip()
    if not comment:
        raise EmptyComment()

    return rating, comment


def aggregate_feedback(entries: Iterable[FeedbackEntry]) -> FeedbackAggregate:
    """
    Build the read model over all feedback.

    Entries are ordered newest first; entries sharing a timestamp are ordered
    by id, highest first. The mean is None when there is nothing to average.
    """
    ordered = sorted(entries, key=lambda entry: (entry.created_at, entry.id), reverse=True)
    count = len(ordered)

    distribution = {rating: 0 for rating in range(MIN_RATING, MAX_RATING + 1)}
    for entry in ordered:
        distribution[entry.rating] += 1

    mean_rating = sum(entry.rating for entry in ordered) / count if count else None

    return FeedbackAggregate(
        count=count,
        mean_rating=mean_rating,
        rating_distribution=distribution,
        ordered_entries=ordered,
    )


class FeedbackPipeline:
    """Submission and listing of customer feedback in front of a FeedbackStore"""

    def __init__(self, store: FeedbackStore):
        self.store = store

    def submit(self, submission: FeedbackSubmission) -> SubmitResult:
        """
        Validate and persist one feedback submission.

        Args:
            submission: Rating and comment as entered by the caller

        Returns:
            SubmitResult: The stored entry, flagged so callers refetch their lists

        Raises:
            RatingOutOfRange, EmptyComment: input rejected, nothing was written
            FeedbackPersistError: the store failed; the submission can be retried unchanged
        """
        logger.debug(f"Feedback submission {SubmissionState.VALIDATING.value}")
        try:
            rating, comment = validate_submission(submission)
        except (RatingOutOfRange, EmptyComment) as exc:
            logger.warning(f"Feedback submission {exc.state.value}: {exc.code}")
            raise

        logger.debug(f"Feedback submission {SubmissionState.PERSISTING.value}")
        try:
            entry = self.store.create(rating, comment)
        except FeedbackStoreUnavailable as exc:
            logger.error(f"Feedback submission {SubmissionState.PERSIST_FAILED.value}: {str(exc)}")
            raise FeedbackPersistError(
                "Failed to submit feedback. Please try again.",
                submission=submission,
            ) from exc

        logger.info(f"Feedback submission {SubmissionState.PERSISTED.value} as {entry.id}")
        return SubmitResult(entry=entry)

    def list(self) -> FeedbackAggregate:
        """
        Return all stored feedback as an aggregated, newest-first read model.

        Raises:
            FeedbackReadError: the store could not be read
        """
        try:
            entries = self.store.list_all()
        except FeedbackStoreUnavailable as exc:
            logger.error(f"Error listing feedback: {str(exc)}")
            raise FeedbackReadError("Failed to load feedback. Please try again.") from exc
        return aggregate_feedback(entries)
