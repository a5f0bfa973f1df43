from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Any, Dict, List, Optional

MIN_RATING = 1
MAX_RATING = 5

RATING_LABELS = {
    1: "Poor",
    2: "Fair",
    3: "Good",
    4: "Very Good",
    5: "Excellent",
}


class SubmissionState(str, Enum):
    """Caller-visible state of one submission attempt"""
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"


class FeedbackError(Exception):
    """Base exception for the feedback pipeline"""

    state: SubmissionState = SubmissionState.IDLE


class FeedbackValidationError(FeedbackError):
    """Caller input error; fix the input and submit again"""

    state = SubmissionState.REJECTED
    code = "VALIDATION_ERROR"
    field = ""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RatingOutOfRange(FeedbackValidationError):
    code = "RATING_OUT_OF_RANGE"
    field = "rating"

    def __init__(self, rating: object = None):
        self.rating = rating
        if rating is None or (type(rating) is int and rating == 0):
            super().__init__("Please select a rating before submitting.")
        else:
            super().__init__(f"Please choose a rating between {MIN_RATING} and {MAX_RATING} flames.")


class EmptyComment(FeedbackValidationError):
    code = "EMPTY_COMMENT"
    field = "comment"

    def __init__(self):
        super().__init__("Please enter a comment with your rating.")


class FeedbackStoreUnavailable(Exception):
    """Raised by the persistence layer when the backing store fails"""

    pass


class FeedbackPersistError(FeedbackError):
    """Transient storage failure; the same input can be retried as-is"""

    state = SubmissionState.PERSIST_FAILED

    def __init__(self, message: str, submission: Optional["FeedbackSubmission"] = None):
        self.message = message
        self.submission = submission
        super().__init__(message)


class FeedbackReadError(FeedbackPersistError):
    """The feedback list could not be read from the store"""

    pass


class FeedbackSubmission(BaseModel):
    """Rating and comment exactly as entered by the caller.

    A missing rating means "no selection made" and is rejected by the
    pipeline, not defaulted. The rating is kept as sent so the pipeline can
    reject non-integers with a field-specific error.
    """
    rating: Optional[Any] = Field(default=None, description="Flame rating, 1 to 5")
    comment: Optional[str] = Field(default=None, description="Free-text comment")


class FeedbackEntry(BaseModel):
    """Stored feedback record; never mutated after creation"""
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, description="Store-issued, monotonically increasing identifier")
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    comment: str = Field(min_length=1)
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @computed_field
    @property
    def rating_label(self) -> str:
        return RATING_LABELS[self.rating]


class FeedbackAggregate(BaseModel):
    """Read model over all stored feedback, recomputed on every read"""
    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0)
    mean_rating: Optional[float] = Field(
        default=None, description="Absent when there is no feedback yet"
    )
    rating_distribution: Dict[int, int] = Field(default_factory=dict)
    ordered_entries: List[FeedbackEntry] = Field(
        default_factory=list, description="Newest first"
    )

    @computed_field
    @property
    def is_empty(self) -> bool:
        return self.count == 0


class SubmitResult(BaseModel):
    """Successful submission plus the signal that cached feedback lists are stale"""
    entry: FeedbackEntry
    read_model_stale: bool = True
    state: SubmissionState = SubmissionState.PERSISTED
