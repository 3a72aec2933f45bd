"""zodforge converts OpenAPI / JSON-Schema documents into TypeScript type
declarations and zod validator expressions.

```python
from zodforge import generate, render_declarations
from zodforge.schema import load_document_from_file

result = generate(load_document_from_file("openapi.yaml"))
print(render_declarations(result))
```
"""

from zodforge.conversion import ConversionOptions
from zodforge.errors import (
    EmptyCompositionError,
    InvalidReferenceError,
    InvalidSchemaError,
    SchemaDecompositionError,
    SchemaNestingError,
    SchemaNotFoundError,
    UnresolvedSchemaNameError,
    UnsupportedSchemaKindError,
    ZodforgeError,
)
from zodforge.generator import (
    GenerationResultModel,
    SchemaArtifactModel,
    generate,
    render_declarations,
)

__all__ = [
    "ConversionOptions",
    "EmptyCompositionError",
    "GenerationResultModel",
    "InvalidReferenceError",
    "InvalidSchemaError",
    "SchemaArtifactModel",
    "SchemaDecompositionError",
    "SchemaNestingError",
    "SchemaNotFoundError",
    "UnresolvedSchemaNameError",
    "UnsupportedSchemaKindError",
    "ZodforgeError",
    "generate",
    "render_declarations",
]
