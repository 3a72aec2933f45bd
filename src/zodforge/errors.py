"""Error types raised while resolving and converting schema documents.

Every fatal error carries the offending reference (or canonical name) and the
operation that was in progress, so callers can point at the fragment of the
source document without re-deriving it.
"""


class ZodforgeError(Exception):
    """Base class for all conversion errors.

    Attributes:
        message: Human readable description of the failure
        ref: The reference or canonical schema name involved, if known
        operation: The operation in progress (resolve, convert, build_graph, ...)
    """

    def __init__(self, message: str, *, ref: str | None = None, operation: str | None = None):
        self.message = message
        self.ref = ref
        self.operation = operation
        super().__init__(message)

    def __str__(self) -> str:
        context = []
        if self.ref is not None:
            context.append(f"ref={self.ref}")
        if self.operation is not None:
            context.append(f"operation={self.operation}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class SchemaNotFoundError(ZodforgeError):
    """A reference points at a definition that does not exist in the document."""

    pass


class InvalidReferenceError(ZodforgeError):
    """A reference string is malformed (no leaf segment, external target, ...)."""

    pass


class UnresolvedSchemaNameError(InvalidReferenceError):
    """A canonical name was looked up before its reference was ever resolved."""

    pass


class UnsupportedSchemaKindError(ZodforgeError):
    """A schema node matches none of the recognized shapes."""

    def __init__(self, kind: str, *, ref: str | None = None, operation: str | None = "convert"):
        self.kind = kind
        super().__init__(f"Unsupported schema type: {kind}", ref=ref, operation=operation)


class EmptyCompositionError(ZodforgeError):
    """An allOf/oneOf/anyOf list is present but has no members."""

    def __init__(self, keyword: str, *, ref: str | None = None, operation: str | None = "convert"):
        self.keyword = keyword
        super().__init__(f"Empty {keyword} composition", ref=ref, operation=operation)


class SchemaDecompositionError(ZodforgeError):
    """A `$ref` node also carries keywords that define a type of its own."""

    def __init__(self, ref: str, keywords: list[str], *, operation: str | None = "convert"):
        self.keywords = keywords
        super().__init__(
            f"$ref cannot be combined with {', '.join(keywords)}", ref=ref, operation=operation
        )


class InvalidSchemaError(ZodforgeError):
    """A document fragment cannot be read as a schema node."""

    pass


class SchemaNestingError(ZodforgeError):
    """Expanding a schema went deeper than the interpreter's recursion limit.

    Raised for very long chains of nested references; ``ref`` names the
    schema that was being expanded when the limit was hit.
    """

    def __init__(self, ref: str, *, operation: str | None = "convert"):
        super().__init__(
            "Schema nesting too deep to convert; raise sys.setrecursionlimit() to allow it",
            ref=ref,
            operation=operation,
        )
