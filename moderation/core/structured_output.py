"""Decoding of schema-constrained provider output.

Providers hand back raw text that is supposed to conform to a pydantic
response model. Nothing downstream trusts that text until it has passed
through ``decode_structured``.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from moderation.core.exceptions import SchemaValidationFailedError
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_PREVIEW_CHARS = 200


def json_schema_for(model: Type[BaseModel]) -> Dict[str, Any]:
    """Return the JSON schema of a response model using its wire aliases."""
    return model.model_json_schema(by_alias=True)


def decode_structured(raw: Optional[str], model: Type[ModelT]) -> ModelT:
    """Validate raw provider output against a response model.

    Args:
        raw: Text returned by the provider (expected to be a JSON document)
        model: Pydantic model describing the expected output

    Returns:
        An instance of ``model``

    Raises:
        SchemaValidationFailedError: If the output is not text, is empty, is not JSON, or
            does not match the model (missing field, wrong type)
    """
    if raw is not None and not isinstance(raw, str):
        raise SchemaValidationFailedError(
            f"Provider returned {type(raw).__name__} instead of text for {model.__name__}",
            raw_output=str(raw)[:_PREVIEW_CHARS],
        )

    if raw is None or not raw.strip():
        raise SchemaValidationFailedError(
            f"Provider returned no output for {model.__name__}",
            raw_output=raw,
        )

    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        preview = raw[:_PREVIEW_CHARS]
        LOGGER.warning(
            f"Provider output does not match {model.__name__}",
            extra={"errors": e.errors(include_url=False), "raw_preview": preview},
        )
        raise SchemaValidationFailedError(
            f"Provider output does not match {model.__name__}: {e.error_count()} error(s)",
            original_error=e,
            raw_output=raw,
        ) from e
