"""Brief extraction — pulls a TripBrief out of a model's free-form reply text."""

import json
import logging

from pydantic import ValidationError

from tripbrief.schemas.brief import TripBrief
from tripbrief.services.providers.errors import ResponseParseError

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def _candidates(text: str):
    """Yield substrings that may hold the JSON object, most specific first."""
    first = text.find("{")
    if first != -1:
        # Brace-balanced object starting at the first "{"; trailing prose is ignored
        try:
            obj, _ = _decoder.raw_decode(text, first)
            yield obj
        except json.JSONDecodeError:
            pass

        last = text.rfind("}")
        if last > first:
            try:
                yield json.loads(text[first:last + 1])
            except json.JSONDecodeError:
                pass

    try:
        yield json.loads(text)
    except json.JSONDecodeError:
        pass


def find_json_object(text: str) -> dict:
    """Locate and decode the first JSON object embedded in ``text``.

    Raises:
        ResponseParseError if no candidate decodes to a JSON object.
    """
    for candidate in _candidates(text or ""):
        if isinstance(candidate, dict):
            return candidate
    raise ResponseParseError("Could not find a JSON object in the model reply")


def extract_trip_brief(text: str) -> TripBrief:
    """Decode and validate a TripBrief from raw reply text."""
    data = find_json_object(text)
    try:
        return TripBrief.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        logger.warning(f"Trip brief failed validation: {e}\nRaw: {text[:500]}")
        raise ResponseParseError(
            f"Model reply is missing or has invalid fields: {', '.join(fields)}"
        ) from e
