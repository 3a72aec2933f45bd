"""Resolution of `$ref` pointers inside a single in-memory document.

Resolution is lazy: a reference is only looked up (and its canonical name only
recorded) the first time somebody asks for it. Looking a schema up by canonical
name therefore only works after its reference has been resolved once.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from zodforge.errors import (
    InvalidReferenceError,
    InvalidSchemaError,
    SchemaNotFoundError,
    UnresolvedSchemaNameError,
)
from zodforge.schema.models import SchemaNodeModel, parse_schema
from zodforge.schema.naming import normalize_identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefInfo:
    """A resolved reference.

    Attributes:
        ref: The corrected reference string (``#/components/schemas/Pet-Item``)
        name: The leaf name as declared in the document (``Pet-Item``)
        normalized: The canonical identifier (``Pet_Item``)
    """

    ref: str
    name: str
    normalized: str


def fix_ref(ref: str) -> str:
    """Correct the common ``#components/...`` spelling to ``#/components/...``."""
    if ref.startswith("#") and not ref.startswith("#/"):
        fixed = "#/" + ref[1:]
        logger.debug(f"Corrected malformed $ref {ref} to {fixed}")
        return fixed
    return ref


def schema_ref(name: str) -> str:
    """Build the reference of a component schema from its declared name."""
    return "#/components/schemas/" + name.replace("~", "~0").replace("/", "~1")


def _split_ref(ref: str) -> tuple[list[str], str]:
    if not ref.startswith("#/"):
        raise InvalidReferenceError(
            "Invalid $ref, only local references are supported", ref=ref, operation="resolve"
        )
    segments = [
        segment.replace("~1", "/").replace("~0", "~") for segment in ref[2:].split("/")
    ]
    *container, leaf = segments
    if not leaf:
        raise InvalidReferenceError("Invalid $ref", ref=ref, operation="resolve")
    return container, leaf


class SchemaResolver:
    """Resolves references against one document and memoizes canonical names.

    Example:
        >>> resolver = SchemaResolver({"components": {"schemas": {"Pet-Item": {"type": "string"}}}})
        >>> node, info = resolver.resolve("#/components/schemas/Pet-Item")
        >>> info.normalized
        'Pet_Item'
        >>> resolver.resolve_schema_name("Pet_Item").ref
        '#/components/schemas/Pet-Item'
    """

    def __init__(self, document: Mapping[str, Any]):
        self.document = document
        self._info_by_ref: dict[str, RefInfo] = {}
        self._info_by_name: dict[str, RefInfo] = {}
        self._nodes: dict[str, SchemaNodeModel] = {}

    def get_raw_by_ref(self, ref: str) -> Any:
        """Return the raw document value a reference points at.

        Raises:
            InvalidReferenceError: If the reference has no leaf or is not local
            SchemaNotFoundError: If the container or the leaf does not exist
        """
        ref = fix_ref(ref)
        container_path, leaf = _split_ref(ref)

        current: Any = self.document
        for segment in container_path:
            if not isinstance(current, Mapping) or segment not in current:
                raise SchemaNotFoundError("Schema not found for $ref", ref=ref, operation="resolve")
            current = current[segment]

        if not isinstance(current, Mapping) or leaf not in current:
            raise SchemaNotFoundError("Schema not found for $ref", ref=ref, operation="resolve")
        return current[leaf]

    def get_schema_by_ref(self, ref: str) -> SchemaNodeModel:
        """Return the parsed schema node a reference points at."""
        return self.resolve(ref)[0]

    def resolve(self, ref: str) -> tuple[SchemaNodeModel, RefInfo]:
        """Resolve a reference to its schema node and canonical name.

        Args:
            ref: A local reference such as ``#/components/schemas/Pet``

        Returns:
            Tuple of (schema node, reference info)

        Raises:
            InvalidReferenceError: If the reference has no leaf or is not local
            SchemaNotFoundError: If the target does not exist
        """
        ref = fix_ref(ref)
        cached = self._info_by_ref.get(ref)
        if cached is not None:
            return self._nodes[ref], cached

        raw = self.get_raw_by_ref(ref)
        _, leaf = _split_ref(ref)
        if not isinstance(raw, (Mapping, bool)):
            raise InvalidSchemaError(
                f"$ref target is a {type(raw).__name__}, not a schema", ref=ref, operation="resolve"
            )
        try:
            node = parse_schema(raw)
        except ValidationError as e:
            raise InvalidSchemaError(
                f"Invalid schema: {e.errors()[0]['msg']}", ref=ref, operation="resolve"
            ) from e

        info = RefInfo(ref=ref, name=leaf, normalized=self._unique_name(leaf, ref))
        self._info_by_ref[ref] = info
        self._info_by_name[info.normalized] = info
        self._nodes[ref] = node
        logger.debug(f"Resolved {ref} as {info.normalized}")
        return node, info

    def _unique_name(self, leaf: str, ref: str) -> str:
        """Canonical name for a newly resolved reference.

        A name already taken by another reference gets the first free
        ``_2``, ``_3``, ... suffix, so both schemas are emitted.
        """
        base = normalize_identifier(leaf)
        name, suffix = base, 2
        while name in self._info_by_name:
            name = f"{base}_{suffix}"
            suffix += 1
        if name != base:
            taken_by = self._info_by_name[base].ref
            logger.warning(f"Canonical name {base} of {ref} is taken by {taken_by}; using {name}")
        return name

    def resolve_ref(self, ref: str) -> RefInfo:
        """Return the reference info for a reference, resolving it if needed."""
        return self.resolve(ref)[1]

    def resolve_schema_name(self, name: str) -> RefInfo:
        """Look up a canonical name whose reference was resolved earlier.

        Raises:
            UnresolvedSchemaNameError: If no resolved reference has this name
        """
        info = self._info_by_name.get(name)
        if info is None:
            raise UnresolvedSchemaNameError(
                f"Unable to resolve schema name: {name}", ref=name, operation="resolve"
            )
        return info

    def resolved_names(self) -> list[str]:
        """Canonical names resolved so far, in resolution order."""
        return list(self._info_by_name)

    def component_schema_refs(self) -> list[str]:
        """References of every entry under ``components.schemas``, in document order."""
        components = self.document.get("components") or {}
        schemas = components.get("schemas") or {}
        return [schema_ref(name) for name in schemas]
