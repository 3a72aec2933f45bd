"""Core types threaded through a conversion run.

This module defines:
- PresenceMeta: the presence context a node is converted in
- ConversionResult: the (type, validator) pair produced for one node
- CycleGuard: the reference path of the current recursive descent
- ConversionContext: per-run state shared by every recursive call
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from zodforge.conversion.options import ConversionOptions
from zodforge.schema.models import SchemaNodeModel
from zodforge.schema.resolver import SchemaResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresenceMeta:
    """Presence context supplied by the parent.

    Attributes:
        is_required: Whether the parent requires the value; None at the root
            of a named schema, where no presence applies.
    """

    is_required: bool | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Type expression and validator expression for one schema node.

    Attributes:
        type_expr: TypeScript type expression
        validator_expr: Validator expression without any trailing chain
        ref: Canonical name when the node is a reference
        is_nullable: True when the validator expression already accepts null
        is_required: Presence inherited from the parent context
    """

    type_expr: str
    validator_expr: str
    ref: str | None = None
    is_nullable: bool = False
    is_required: bool | None = None


UNKNOWN_RESULT = ConversionResult("unknown", "z.unknown()")


@dataclass
class CycleGuard:
    """Tracks the canonical names currently being expanded.

    The path is call-stack scoped: a name is pushed while its reference is
    expanded and popped afterwards, so a name can only repeat when the schema
    reaches itself.
    """

    path: list[str] = field(default_factory=list)
    circular: set[str] = field(default_factory=set)

    def is_on_path(self, name: str) -> bool:
        return name in self.path

    def mark_circular(self, name: str) -> None:
        if name not in self.circular:
            logger.debug(f"Circular reference detected: {' -> '.join([*self.path, name])}")
        self.circular.add(name)

    @contextmanager
    def expanding(self, name: str) -> Iterator[None]:
        self.path.append(name)
        try:
            yield
        finally:
            self.path.pop()


@dataclass
class ConversionContext:
    """State shared by every recursive call of one conversion run.

    Attributes:
        resolver: Resolver for the document being converted
        options: Conversion policies
        registry: Canonical name to converted result; None marks a schema
            whose expansion is in progress
        guard: Cycle guard for the current descent
    """

    resolver: SchemaResolver
    options: ConversionOptions = field(default_factory=ConversionOptions)
    registry: dict[str, ConversionResult | None] = field(default_factory=dict)
    guard: CycleGuard = field(default_factory=CycleGuard)

    def is_registered(self, name: str) -> bool:
        return name in self.registry

    def register_placeholder(self, name: str) -> None:
        self.registry[name] = None

    def register(self, name: str, result: ConversionResult) -> None:
        self.registry[name] = result
        logger.debug(f"Registered {name}")

    def resolve_for_chain(self, node: SchemaNodeModel) -> SchemaNodeModel:
        """Follow references until an inline definition is reached."""
        seen: set[str] = set()
        while node.ref is not None and node.ref not in seen:
            seen.add(node.ref)
            node = self.resolver.get_schema_by_ref(node.ref)
        return node
