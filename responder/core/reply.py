from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "خليك كده متكلمنيش 🙄"
DEGRADED_RESPONSE = "مش ناقصه صداع بقا"
TOGGLE_AI_COMMAND = "!toggleai"

# name -> whether the command takes arguments
COMMANDS = {
    "img": True,
    "pfp": True,
    "song": True,
    "toggleai": False,
    "help": False,
    "logs": False,
}

_COMMAND_RE = re.compile(r"^!(?P<name>[A-Za-z]+)(?:\s+(?P<args>.+))?$", re.DOTALL)
_PHONE_RE = re.compile(r"^\+?\d{3,15}$")


class ReplyDecodeError(ValueError):
    """Raised when model output cannot be read as a reply object."""


class StructuredReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    response: str
    command: Optional[str] = None
    terminate: bool = False


class ParsedCommand(BaseModel):
    name: str
    args: Optional[str] = None
    artist: Optional[str] = None
    title: Optional[str] = None


def degraded_reply() -> StructuredReply:
    return StructuredReply(
        response=DEGRADED_RESPONSE,
        command=TOGGLE_AI_COMMAND,
        terminate=True,
    )


def _strip_code_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped[3:]
        if stripped.lower().startswith("json"):
            stripped = stripped[len("json"):]
        stripped = stripped.rstrip()
        if stripped.endswith("```"):
            stripped = stripped[:-3]
    return stripped.strip()


def _extract_json_segment(text: str) -> Optional[str]:
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start: idx + 1]
    return None


def _load_object(raw: str) -> dict:
    cleaned = _strip_code_fences(raw)
    try:
        decoded = json.loads(cleaned)
    except (ValueError, RecursionError) as exc:
        segment = _extract_json_segment(cleaned)
        if segment is None:
            raise ReplyDecodeError(f"model output is not JSON: {exc}") from exc
        try:
            decoded = json.loads(segment)
        except (ValueError, RecursionError) as inner:
            raise ReplyDecodeError(f"model output is not JSON: {inner}") from inner
    if not isinstance(decoded, dict):
        raise ReplyDecodeError(
            f"expected a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def _coerce_terminate(value: Any) -> bool:
    # null, zero, NaN and "" are false; every other value is true, "false" included.
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def decode_reply(raw: str) -> StructuredReply:
    """Decode raw model text into a reply, filling defaults field by field.

    Raises ReplyDecodeError when the text holds no JSON object at all; any
    object, even an empty one, decodes.
    """
    data = _load_object(raw or "")

    response = data.get("response")
    if not isinstance(response, str) or not response.strip():
        response = FALLBACK_RESPONSE

    command = data.get("command")
    if not isinstance(command, str) or not command.strip():
        command = None

    return StructuredReply(
        response=response,
        command=command,
        terminate=_coerce_terminate(data.get("terminate")),
    )


def parse_reply(raw: str) -> StructuredReply:
    try:
        return decode_reply(raw)
    except ReplyDecodeError as exc:
        logger.warning("Response parsing error: %s (raw=%r)", exc, (raw or "")[:200])
        return degraded_reply()


def parse_command(command: Optional[str]) -> Optional[ParsedCommand]:
    """Match a command string against the known vocabulary.

    Returns None for anything that is not a well-formed known command. The
    caller still forwards such strings untouched.
    """
    if not command:
        return None
    match = _COMMAND_RE.match(command.strip())
    if not match:
        return None

    name = match.group("name").lower()
    args = match.group("args")
    args = args.strip() if args else None
    if name not in COMMANDS:
        return None
    takes_args = COMMANDS[name]
    if takes_args != bool(args):
        return None

    if name == "pfp" and not _PHONE_RE.match(args.replace(" ", "")):
        return None
    if name == "song":
        artist, sep, title = args.partition(" - ")
        if sep and artist.strip() and title.strip():
            return ParsedCommand(
                name=name, args=args, artist=artist.strip(), title=title.strip()
            )
        return ParsedCommand(name=name, args=args, title=args)
    return ParsedCommand(name=name, args=args)
