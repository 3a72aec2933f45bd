"""Conversion of schema nodes into TypeScript types and zod validator expressions.

## Key Components

- `convert`: recursive conversion of one node, returns a `ConversionResult`
- `convert_with_chain`: conversion at a point of use, with the constraint chain
- `ConversionContext`: per-run state (resolver, options, registry, cycle guard)
- `ConversionOptions`: every conversion policy in one immutable record

## Quick Example

```python
from zodforge.conversion import ConversionContext, convert
from zodforge.schema import SchemaResolver

ctx = ConversionContext(resolver=SchemaResolver(document))
result = convert({"type": "string", "format": "email"}, ctx)
result.validator_expr  # 'z.string()'
```
"""

from ._types import ConversionContext, ConversionResult, CycleGuard, PresenceMeta
from .chain import build_chain, presence_modifier
from .engine import convert, convert_with_chain
from .options import ConversionOptions

__all__ = [
    "ConversionContext",
    "ConversionOptions",
    "ConversionResult",
    "CycleGuard",
    "PresenceMeta",
    "build_chain",
    "convert",
    "convert_with_chain",
    "presence_modifier",
]
