"""
Discovery of the index patterns a dashboard export depends on.

Each visualization in an export keeps its configuration in ``visState``, a
JSON document serialized to a string and embedded in the saved object. The
functions here decode that embedded document and collect the
``params.index_pattern`` titles it names. They perform no I/O.
"""
import json
from typing import Any, Iterable, Mapping, Optional, Set

import structlog

logger = structlog.get_logger(__name__)


def decode_embedded(text: str) -> Any:
    """
    Decode a JSON document embedded in a string field.

    A state that was escaped twice still carries ``\\"`` sequences once the
    outer document is decoded; those are unescaped before a second attempt.

    Raises:
        ValueError: If the text is not JSON, escaped or not
    """
    try:
        return json.loads(text)
    except ValueError:
        if '\\"' not in text:
            raise
    return json.loads(text.replace('\\"', '"'))


def _vis_state(saved_object: Mapping[str, Any]) -> Optional[str]:
    attributes = saved_object.get("attributes")
    if isinstance(attributes, Mapping) and isinstance(attributes.get("visState"), str):
        return attributes["visState"]
    state = saved_object.get("visState")
    return state if isinstance(state, str) else None


def _as_title(value: Any) -> Optional[str]:
    # Non-string scalars are matched by their JSON text, so 7 looks up "7".
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def index_pattern_of(saved_object: Mapping[str, Any]) -> Optional[str]:
    """
    Return the index pattern title referenced by one saved object, if any.

    A ``visState`` that is not valid JSON is logged and yields no reference.
    """
    raw_state = _vis_state(saved_object)
    if raw_state is None:
        return None
    try:
        state = decode_embedded(raw_state)
    except ValueError as e:
        logger.warning(
            "Skipping unreadable visState",
            object_id=saved_object.get("id"),
            error=str(e),
        )
        return None

    params = state.get("params") if isinstance(state, Mapping) else None
    if not isinstance(params, Mapping):
        return None
    return _as_title(params.get("index_pattern"))


def scan_index_patterns(objects: Iterable[Any]) -> Set[str]:
    """
    Collect the distinct index pattern titles referenced by saved objects.

    Objects without a readable ``visState``, or whose state has no
    ``params.index_pattern``, contribute nothing. Titles are compared as
    exact strings.

    Args:
        objects: Decoded elements of an export document's ``objects`` array

    Returns:
        Set[str]: Referenced index pattern titles
    """
    names: Set[str] = set()
    for saved_object in objects:
        if not isinstance(saved_object, Mapping):
            continue
        name = index_pattern_of(saved_object)
        if name is not None:
            names.add(name)
    return names
