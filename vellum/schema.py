"""Front-matter schema for Vellum blog posts.

This module defines the raw shape a post's front matter must have before it
can become a Post: required fields, string length ceilings, the closed
enumerations and date/URL coercion. Validation is done with pydantic and
every failure is reported as a list of FieldIssue entries on a
PostValidationError, so callers can report all problems of a post at once.

Key classes:
- Category, Mood, Language: Closed enumerations.
- SeoMeta: Optional search-engine overrides.
- PostFrontmatter: Validated front matter with defaults applied.
- PostValidationError: Raised when a record does not match the schema.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .images import ImageAsset

DEFAULT_AUTHOR = "Khoi Van"

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 200
SEO_TITLE_MAX_LENGTH = 60
SEO_DESCRIPTION_MAX_LENGTH = 160


class Category(str, Enum):
    ENGINEERING = "engineering"
    LIFE = "life"
    NOTES = "notes"
    PROJECTS = "projects"


class Mood(str, Enum):
    TECHNICAL = "technical"
    PERSONAL = "personal"
    REFLECTIVE = "reflective"
    HUMOROUS = "humorous"


class Language(str, Enum):
    VI = "vi"
    EN = "en"


DEFAULT_CATEGORY = Category.NOTES
DEFAULT_LANGUAGE = Language.VI


@dataclass(frozen=True)
class FieldIssue:
    """A single schema violation.

    Attributes:
        field: Dotted front-matter key that failed (e.g. ``seo.title``).
        kind: One of ``missing``, ``wrong_type``, ``out_of_range``,
            ``not_in_enum``, ``malformed_url``, ``invalid_image`` or
            ``duplicate_id``.
        message: Human-readable explanation.
    """

    field: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.field or '<root>'}: {self.message} ({self.kind})"


class PostValidationError(Exception):
    """Error raised when a post's front matter fails validation.

    Attributes:
        post_id: Id of the post (or its source path) that failed.
        issues: Every violation found in the record.
    """

    def __init__(self, post_id: str, issues: list[FieldIssue]):
        self.post_id = post_id
        self.issues = list(issues)
        details = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"{post_id}: {details}")

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


def _coerce_datetime(value: Any) -> Any:
    # YAML parses bare dates into date objects; datetime is a date subclass.
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    return value


def _ensure_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        return str(_URL_ADAPTER.validate_python(value))
    except ValidationError as exc:
        raise PydanticCustomError(
            "url_parsing",
            "Input should be a valid URL, {reason}",
            {"reason": exc.errors()[0]["msg"]},
        ) from exc


CanonicalURL = Annotated[str, AfterValidator(_check_url)]


class SeoMeta(BaseModel):
    """Search-engine metadata overrides for a post."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: str | None = Field(default=None, max_length=SEO_TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=SEO_DESCRIPTION_MAX_LENGTH)
    og_image: str | None = None
    canonical_url: CanonicalURL | None = Field(default=None, alias="canonicalURL")
    noindex: bool = Field(default=False, strict=True)


class PostFrontmatter(BaseModel):
    """Validated post front matter with defaults applied.

    Keys are read in camelCase (``pubDate``, ``heroImageAlt``) and exposed as
    snake_case attributes. Unknown keys, including a previously derived
    ``categorySlug``, are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH)
    pub_date: datetime
    updated_date: datetime | None = None
    author: str = DEFAULT_AUTHOR
    hero_image: Any = None
    hero_image_alt: str | None = None
    category: Category = DEFAULT_CATEGORY
    tags: list[str] = Field(default_factory=list)
    mood: Mood | None = None
    series: str | None = None
    series_order: int | float | None = None
    draft: bool = Field(default=False, strict=True)
    featured: bool = Field(default=False, strict=True)
    language: Language = DEFAULT_LANGUAGE
    reading_time: str | None = None
    seo: SeoMeta | None = None

    @field_validator("pub_date", "updated_date", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> Any:
        return _coerce_datetime(value)

    @field_validator("pub_date", "updated_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        return _ensure_utc(value)

    @field_validator("series_order", mode="before")
    @classmethod
    def _check_series_order(cls, value: Any) -> Any:
        # bool is an int subclass.
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            return value
        raise PydanticCustomError("number_type", "Input should be a number")

    @field_validator("hero_image", mode="before")
    @classmethod
    def _check_image_reference(cls, value: Any) -> Any:
        if value is None or isinstance(value, (ImageAsset, Mapping)):
            return value
        if isinstance(value, str) and value.strip():
            return value.strip()
        raise PydanticCustomError(
            "image_reference",
            "Expected an image path or image descriptor",
        )


_ISSUE_KINDS = {
    "missing": "missing",
    "string_too_long": "out_of_range",
    "string_too_short": "out_of_range",
    "too_long": "out_of_range",
    "enum": "not_in_enum",
    "literal_error": "not_in_enum",
    "image_reference": "invalid_image",
}


_UNION_TAGS = {"int", "float"}


def _issue_kind(error_type: str) -> str:
    if error_type.startswith("url_"):
        return "malformed_url"
    return _ISSUE_KINDS.get(error_type, "wrong_type")


def issues_from_validation_error(exc: ValidationError) -> list[FieldIssue]:
    """Translate a pydantic ValidationError into FieldIssue entries.

    Args:
        exc: Error raised by pydantic.

    Returns:
        One FieldIssue per pydantic error, keyed by dotted front-matter path.
    """
    issues = []
    for error in exc.errors():
        # Numeric unions tag the location with the member type tried.
        loc = [str(part) for part in error["loc"] if part not in _UNION_TAGS]
        field = ".".join(loc)
        issues.append(FieldIssue(field, _issue_kind(error["type"]), error["msg"]))
    return issues


def validate_frontmatter(raw: Any, post_id: str = "<unknown>") -> PostFrontmatter:
    """Validate raw front matter against the post schema.

    Args:
        raw: Untyped mapping extracted from a content source.
        post_id: Identifier used in error reports.

    Returns:
        PostFrontmatter with defaults applied.

    Raises:
        PostValidationError: If any field is missing, mistyped, too long,
            outside its enumeration or malformed.
    """
    if not isinstance(raw, Mapping):
        raise PostValidationError(
            post_id, [FieldIssue("", "wrong_type", "Front matter must be a mapping")]
        )
    try:
        return PostFrontmatter.model_validate(dict(raw))
    except ValidationError as exc:
        raise PostValidationError(post_id, issues_from_validation_error(exc)) from exc
