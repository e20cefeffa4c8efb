"""
Loading of message sequence definitions.

A definition is a JSON array of ``{"text": str, "delay": int}`` objects. Every
rule violation is reported as a SequenceLoadError naming the offending entry
and the constraint it breaks, before any protocol run starts.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from wscadence.config.constants import LOGGER_NAME, MAX_DELAY_MS
from wscadence.exceptions import SequenceLoadError
from wscadence.protocol.messages import MessageSequence, ProtocolMessage

logger = logging.getLogger(LOGGER_NAME)

# Names used in error messages, matching JSON rather than Python terms
_JSON_TYPE_NAMES = {
    type(None): "null",
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    dict: "object",
}


def _json_type(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def load_sequence_file(path: Union[str, Path]) -> MessageSequence:
    """Read a file and parse its content as a message sequence.

    Raises:
        SequenceLoadError: If the file cannot be read, does not contain JSON,
            or the JSON does not describe a message sequence.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SequenceLoadError(f'Cannot read the file "{path}": {e}') from e

    sequence = parse_sequence_json(content)
    logger.debug(f"Loaded {len(sequence)} protocol messages from {path}")
    return sequence


def parse_sequence_json(data: str) -> MessageSequence:
    """Parse a JSON string as a message sequence."""
    try:
        value = json.loads(data)
    except json.JSONDecodeError as e:
        raise SequenceLoadError(f'Expect "data" to be a JSON string: {e}') from e

    return parse_sequence_data(value)


def parse_sequence_data(data: Any) -> MessageSequence:
    """Validate decoded JSON data and build a message sequence from it."""
    if not isinstance(data, list):
        raise SequenceLoadError(
            f'Expect "data" to be an array; got {_json_type(data)}'
        )

    return MessageSequence(_parse_message(item, index) for index, item in enumerate(data))


def _parse_message(item: Any, index: int) -> ProtocolMessage:
    name = f"data[{index}]"

    try:
        return ProtocolMessage.model_validate(item)
    except ValidationError as e:
        # Errors come in field order, so text problems are reported first
        raise SequenceLoadError(_describe_error(e.errors()[0], name, item)) from e


def _describe_error(error: Dict[str, Any], name: str, item: Any) -> str:
    """Turn the first validation error of an entry into a loader message."""
    if not error["loc"]:
        return f'Expect "{name}" to be an object; got {_json_type(item)}'

    field = error["loc"][0]
    value = item.get(field)
    target = f"{name}.{field}"
    kind = error["type"]

    if field == "text":
        if kind == "string_too_short":
            return f'Expect "{target}" to be a non-empty string'
        return f'Expect "{target}" to be a string; got {_json_type(value)}'

    if field == "delay":
        if kind in ("missing", "number_type"):
            return f'Expect "{target}" to be a number; got {_json_type(value)}'
        if kind == "less_than_equal":
            return f'Expect "{target}" to be at most {MAX_DELAY_MS}; got {value}'
        return f'Expect "{target}" to be a positive integer number; got {value}'

    return f'Invalid "{target}": {error["msg"]}'
