"""Request and response models for the fetch tool."""

from typing import Annotated

from pydantic import AfterValidator, AnyUrl, BaseModel, Field, StrictBool, StrictInt, TypeAdapter

from fetchmcp.parser.parser import ExtractionResult

DEFAULT_MAX_LENGTH = 5000
DEFAULT_START_INDEX = 0

_ANY_URL = TypeAdapter(AnyUrl)


def require_absolute_url(value: str) -> str:
    """Validate that value is an absolute URI and return it unchanged.

    The original string is kept (AnyUrl would normalise it, e.g. by adding
    a trailing slash) so the response echoes exactly what the caller sent.

    Raises:
        ValueError: If value is not an absolute URI with a host.

    """
    parsed = _ANY_URL.validate_python(value)
    if not parsed.host:
        msg = f"URL must include a host: {value!r}"
        raise ValueError(msg)
    return value


AbsoluteUrl = Annotated[str, AfterValidator(require_absolute_url)]
MaxLength = Annotated[StrictInt, Field(gt=0)]
StartIndex = Annotated[StrictInt, Field(ge=0)]


class FetchParams(BaseModel):
    """Validated arguments of one fetch call."""

    url: AbsoluteUrl
    max_length: MaxLength = DEFAULT_MAX_LENGTH
    start_index: StartIndex = DEFAULT_START_INDEX
    raw: StrictBool = False


class FetchSuccess(BaseModel):
    """Successful fetch: the windowed content of the page.

    metadata carries the full extraction result for the optional metadata
    footer and is never serialized.
    """

    title: str | None = Field(description="Page title")
    url: str = Field(description="Fetched URL")
    content: str = Field(description="Extracted content")
    metadata: ExtractionResult | None = Field(default=None, exclude=True)


class FetchFailure(BaseModel):
    """Failed fetch: what went wrong and for which URL."""

    error: str = Field(description="Error message")
    url: str = Field(description="URL that failed")


FetchOutcome = FetchSuccess | FetchFailure
