"""Request-body validation for onboarding content.

`onboarding_schema(lang)` returns a validator bound to one language so that
error messages come back localized. Pydantic does the field checks; the
validator then maps pydantic's error details onto the onboarding error codes.
"""

import logging
from datetime import UTC
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any
from typing import ClassVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import StrictInt
from pydantic import StrictStr
from pydantic import ValidationError
from pydantic import field_validator
from pydantic_core import ErrorDetails
from pydantic_core import PydanticCustomError

from app.core.translation import get_translation

logger = logging.getLogger(__name__)

# Field error codes
REQUIRED = "required"
INVALID_NUMBER = "invalid_number"
INVALID_TYPE = "invalid_type"
INVALID_DATE = "invalid_date"

TEXT_FIELDS = ("title_ar", "subtitle", "subtitle_ar", "content", "content_ar")


def _parse_date_string(value: str) -> str | datetime:
    """Pre-parse a `deleted_at` string before pydantic's ISO 8601 parsing.

    Numeric strings are rejected, otherwise pydantic would read them as epoch
    seconds. RFC 2822 / HTTP dates ("Mon, 15 Jan 2024 10:00:00 GMT") are
    converted here; anything else is left for pydantic.
    """
    text = value.strip()
    try:
        float(text)
    except ValueError:
        pass
    else:
        raise PydanticCustomError("datetime_parsing", "Input should be a date string, not a number")

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return value


class OnboardingRecord(BaseModel):
    """Validated onboarding body. `title` is required, `sort_id` defaults to 0."""

    model_config = ConfigDict(extra="ignore")

    # Fields reported by payload() even when the caller did not send them
    always_present: ClassVar[frozenset[str]] = frozenset({"title", "sort_id"})

    title: StrictStr
    title_ar: StrictStr | None = None
    subtitle: StrictStr | None = None
    subtitle_ar: StrictStr | None = None
    content: StrictStr | None = None
    content_ar: StrictStr | None = None
    # Usually assigned by the upload pipeline
    sort_id: StrictInt = 0
    deleted_at: datetime | None = None

    @field_validator("title", *TEXT_FIELDS, mode="before")
    @classmethod
    def reject_null_text(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("string_type", "Input should be a valid string")
        return v

    @field_validator("sort_id", mode="before")
    @classmethod
    def check_sort_id(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("int_type", "Input should be a valid integer")
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("deleted_at", mode="before")
    @classmethod
    def check_deleted_at_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _parse_date_string(v)
        if v is None or isinstance(v, datetime):
            return v
        raise PydanticCustomError("datetime_type", "Input should be a date string or a datetime")

    @field_validator("deleted_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    def payload(self) -> dict[str, Any]:
        """Return the supplied values plus the fields every record must carry.

        `deleted_at` only shows up when the caller sent it, so an explicit null
        stays distinguishable from an absent value.
        """
        return self.model_dump(include=set(self.model_fields_set | self.always_present))


class OnboardingUpdate(OnboardingRecord):
    """Partial variant used for updates: every field is optional and nothing is defaulted."""

    always_present: ClassVar[frozenset[str]] = frozenset()

    title: StrictStr | None = None
    sort_id: StrictInt | None = None


class FieldError(BaseModel):
    """A single field-level validation failure."""

    path: list[str | int]
    code: str
    message: str


class ValidationResult(BaseModel):
    success: bool
    data: OnboardingRecord | None = None
    errors: list[FieldError] = []


class OnboardingValidationError(Exception):
    """Raised by OnboardingSchema.validate when the body is invalid."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__(errors[0].message if errors else "Invalid onboarding data")


class OnboardingSchema:
    """Onboarding validator bound to a language."""

    def __init__(self, lang: str, partial: bool = False) -> None:
        self.lang = lang
        self.partial = partial
        self.model: type[OnboardingRecord] = OnboardingUpdate if partial else OnboardingRecord

    def safe_validate(self, data: Any) -> ValidationResult:
        """Validate `data` and report errors as values instead of raising."""
        try:
            record = self.model.model_validate(data)
        except ValidationError as e:
            return ValidationResult(success=False, errors=self._field_errors(e))
        return ValidationResult(success=True, data=record)

    def validate(self, data: Any) -> OnboardingRecord:
        """Validate `data` and return the typed record.

        Raises:
            OnboardingValidationError: If any field fails validation.
        """
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise OnboardingValidationError(self._field_errors(e)) from e

    def _field_errors(self, error: ValidationError) -> list[FieldError]:
        errors = [self._to_field_error(detail) for detail in error.errors()]
        logger.debug("Onboarding body rejected with %d error(s)", len(errors))
        return errors

    def _to_field_error(self, detail: ErrorDetails) -> FieldError:
        path = list(detail["loc"])
        field = path[0] if path else None

        # Missing and wrong-type title share one message
        if field == "title":
            code, message = REQUIRED, get_translation(self.lang, "onBoarding_title_required")
        elif field == "sort_id":
            code, message = INVALID_NUMBER, get_translation(self.lang, "invalidNumber")
        elif field == "deleted_at" and isinstance(detail.get("input"), str):
            code, message = INVALID_DATE, get_translation(self.lang, "invalid_date")
        else:
            code, message = INVALID_TYPE, detail["msg"]

        return FieldError(path=path, code=code, message=message)


def onboarding_schema(lang: str, partial: bool = False) -> OnboardingSchema:
    """Build an onboarding validator whose messages are in `lang`."""
    return OnboardingSchema(lang, partial=partial)
