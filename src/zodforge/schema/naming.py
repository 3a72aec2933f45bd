"""Identifier and literal helpers shared by the resolver and the emitters."""

import json
import re
import unicodedata

_IDENTIFIER_KEY = re.compile(r"^[a-zA-Z]\w*$", re.ASCII)
_PATH_PARAM = re.compile(r"\{([^}]+)\}")
_WORD_SPLIT = re.compile(r"[^a-zA-Z0-9]+")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufffe\uffff]")


def normalize_identifier(text: str) -> str:
    """Turn a declared schema name into a safe identifier.

    Args:
        text: Name as declared in the document (e.g. ``"pet-store.Item"``)

    Returns:
        The canonical identifier (``"pet_store_Item"``). Names starting with a
        digit are prefixed with ``_``.
    """
    if text[:1].isdigit():
        text = "_" + text
    normalized = unicodedata.normalize("NFKD", text).strip()
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"-+", "_", normalized)
    return re.sub(r"[^\w-]+", "_", normalized, flags=re.ASCII)


def quote_property_key(name: str) -> str:
    """Quote an object key unless it is a plain identifier."""
    if _IDENTIFIER_KEY.match(name):
        return name
    return json.dumps(name)


def escape_control_characters(text: str) -> str:
    """Escape control characters and forward slashes for a regex literal."""
    text = text.replace("\t", "\\t").replace("\n", "\\n").replace("\r", "\\r")

    def _escape(match: re.Match[str]) -> str:
        code_point = ord(match.group(0))
        if code_point <= 0xFF:
            return f"\\x{code_point:02x}"
        return f"\\u{code_point:04x}"

    text = _CONTROL_CHARS.sub(_escape, text)
    return text.replace("/", "\\/")


def _camel_words(text: str) -> list[str]:
    return [word for word in _WORD_SPLIT.split(text) if word]


def to_camel_case(text: str) -> str:
    """``"pet-id"`` -> ``"petId"``"""
    words = _camel_words(text)
    if not words:
        return ""
    head, *tail = words
    return head[0].lower() + head[1:] + "".join(word[0].upper() + word[1:] for word in tail)


def path_to_variable_name(path: str) -> str:
    """Derive a PascalCase name from a URL path.

    ``/media-objects/{id}`` becomes ``MediaObjectsId`` and ``/robots.txt``
    becomes ``RobotsTxt``.
    """
    return "".join(word[0].upper() + word[1:] for word in _camel_words(path))


def to_colon_path(path: str) -> str:
    """Rewrite ``{param}`` path segments to ``:param`` form."""
    return _PATH_PARAM.sub(lambda match: ":" + to_camel_case(match.group(1)), path)
