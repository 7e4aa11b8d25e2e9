"""
Best-effort JSON extraction from free-form model output.

Models are asked for a bare JSON object but routinely wrap it in prose or
markdown code fences. The scan takes everything between the first "{" and the
last "}" and parses it. Nothing here raises: callers get either ``Parsed`` or
``Degraded`` carrying the raw text.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from socrate.shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Parsed:
    """A JSON object was found and decoded."""
    data: Dict[str, Any]


@dataclass(frozen=True)
class Degraded:
    """No usable JSON object; the raw model text is preserved."""
    raw_text: str
    reason: str


ExtractionResult = Union[Parsed, Degraded]


def extract_json_object(text: str) -> ExtractionResult:
    """Decode the substring between the first '{' and the last '}'."""
    if not isinstance(text, str):
        return Degraded(raw_text=str(text), reason="model output is not text")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return Degraded(raw_text=text, reason="no JSON object found")

    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        return Degraded(raw_text=text, reason=f"invalid JSON: {e}")
    except (ValueError, RecursionError) as e:
        # Valid JSON the decoder refuses: oversized integers, deep nesting
        return Degraded(raw_text=text, reason=f"undecodable JSON: {type(e).__name__}")

    return Parsed(data=data)


def parse_reply(
    text: str,
    reply_model: Type[T],
    fallback: Callable[[str], T]
) -> T:
    """
    Extract and validate a structured reply.

    Args:
        text: Raw model output
        reply_model: Pydantic model the JSON object must satisfy
        fallback: Builds the degraded reply from the raw text

    Returns:
        The validated reply, or ``fallback(text)`` when extraction or
        validation fails
    """
    result = extract_json_object(text)

    if isinstance(result, Parsed):
        try:
            return reply_model.model_validate(result.data)
        except ValidationError as e:
            reason = f"reply does not match {reply_model.__name__}: {e.error_count()} errors"
    else:
        reason = result.reason

    logger.warning(
        "Degrading unparseable model reply",
        extra={"action": "reply_degraded", "reason": reason},
    )
    return fallback(result.raw_text if isinstance(result, Degraded) else text)
