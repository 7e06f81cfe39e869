"""
Strict Base Models for Record, Request and Response Validation

This module provides base classes with consistent validation settings for the
three kinds of data the analytics engine handles.

MOTIVATION:
    Session and exam records arrive from the persistence layer with camelCase
    field names and whatever extra fields the document store carries. API
    request bodies are written by our own frontend and should fail loudly on
    typos. Computed results are immutable values handed to the rendering and
    feedback layers.

Usage:
    # For records delivered by the persistence layer (lenient)
    class SessionRecord(RecordModel):
        questions_solved: int = 0   # accepts "questionsSolved"

    # For request bodies (strictest validation)
    class ExamRequest(StrictRequest):
        exam_name: str

    # For computed values (immutable, camelCase on the wire)
    class TopicScore(StrictResponse):
        success_rate: float

Architecture:
    Persistence → RecordModel (extra="ignore") → ingestion → frozen domain values
    API Request → StrictRequest (extra="forbid") → Route Handler
    Service → StrictResponse (frozen) → API Response / feedback payload
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """
    Base model for raw records delivered by the persistence collaborator.

    Features:
        - alias_generator=to_camel: Accepts the document store's camelCase keys
        - populate_by_name=True: Python code may still use snake_case names
        - extra="ignore": Document fields the engine does not use are dropped
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
    )


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Rejects any fields not explicitly declared in the model, catching
    frontend typos and mismatches at request time rather than runtime.

    Features:
        - extra="forbid": Unknown fields raise 422 Unprocessable Entity
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - alias_generator=to_camel: camelCase on the wire

    Example:
        >>> class ExamRequest(StrictRequest):
        ...     exam_name: str
        >>>
        >>> ExamRequest(examName="Mock 3")  # OK
        >>> ExamRequest(exam="Mock 3")  # Raises ValidationError
    """

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        validate_default=True,  # Validate defaults
        str_strip_whitespace=True,  # Clean string inputs
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for computed analytics values.

    Results are immutable so the same value can be handed to several
    consumers (rendering, feedback payloads) without defensive copies.

    Features:
        - frozen=True: Values cannot be mutated after construction
        - extra="ignore": Silently ignores extra fields
        - alias_generator=to_camel: Serialized as camelCase by FastAPI
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
