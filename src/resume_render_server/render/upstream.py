"""Payload shapes of the upstream résumé transformation service.

The service itself is an external collaborator; this module only models its
request/response contract and decodes responses, which arrive either as one
JSON object or as a stream of newline-delimited partial JSON objects.
"""

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..logger import logger

# Fields that accumulate across streamed partial objects instead of being replaced
LIST_FIELDS = ("changesMade", "keywordsExtracted")


class UpstreamPayloadError(ValueError):
    """Raised when an upstream payload cannot be decoded."""

    pass


class TransformRequest(BaseModel):
    """Request body the upstream transformation endpoint accepts."""

    model_config = ConfigDict(populate_by_name=True)

    resume_text: str = Field(..., min_length=1, alias="resumeText")
    job_description: str | None = Field(default=None, alias="jobDescription")
    is_premium_user: bool = Field(default=False, alias="isPremiumUser")
    bypass_cache: bool = Field(default=False, alias="bypassCache")


class TransformResult(BaseModel):
    """Response of the upstream transformation endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    transformed_resume: str = Field(default="", alias="transformedResume")
    cover_letter: str = Field(default="", alias="coverLetter")
    changes_made: list[str] = Field(default_factory=list, alias="changesMade")
    keywords_extracted: list[str] = Field(default_factory=list, alias="keywordsExtracted")
    fallback_mode: bool | None = Field(default=None, alias="fallbackMode")
    message: str | None = None


def _merge_partial(merged: dict, partial: dict) -> dict:
    for key, value in partial.items():
        if key in LIST_FIELDS and isinstance(value, list):
            merged[key] = [*merged.get(key, []), *value]
        else:
            merged[key] = value
    return merged


def _decode_objects(text: str) -> list[dict]:
    try:
        whole = json.loads(text)
    except json.JSONDecodeError:
        whole = None
    if isinstance(whole, dict):
        return [whole]
    if whole is not None:
        raise UpstreamPayloadError("Upstream payload must be a JSON object")

    objects = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            raise UpstreamPayloadError(
                f"Invalid JSON on line {line_number} of streamed payload: {e.msg}"
            ) from e
        if not isinstance(obj, dict):
            raise UpstreamPayloadError(
                f"Streamed payload line {line_number} is not a JSON object"
            )
        objects.append(obj)
    return objects


def parse_transform_payload(raw: str | bytes) -> TransformResult:
    """Decode an upstream transformation response.

    Args:
        raw: Either a single JSON object or newline-delimited JSON objects,
            each a partial update. Later objects override earlier keys;
            changesMade and keywordsExtracted accumulate.

    Returns:
        The merged TransformResult.

    Raises:
        UpstreamPayloadError: If the payload is empty, not JSON objects, or
            does not match the response shape.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UpstreamPayloadError("Upstream payload is not valid UTF-8") from e

    if not raw.strip():
        raise UpstreamPayloadError("Upstream payload is empty")

    objects = _decode_objects(raw)
    if not objects:
        raise UpstreamPayloadError("Upstream payload contains no JSON objects")

    merged: dict = {}
    for obj in objects:
        _merge_partial(merged, obj)

    try:
        result = TransformResult.model_validate(merged)
    except ValidationError as e:
        raise UpstreamPayloadError(f"Upstream payload has unexpected shape: {e}") from e

    logger.debug(
        "upstream payload decoded",
        parts=len(objects),
        success=result.success,
        fallback_mode=result.fallback_mode,
    )
    return result
