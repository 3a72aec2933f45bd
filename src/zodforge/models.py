"""Base Pydantic models for zodforge.

This module provides the base model class that zodforge's result and option
models inherit from. It establishes consistent configuration across them:

- Strict field validation (no extra fields allowed)
- Immutable instances, so results can be shared between writers

Example:
    >>> from zodforge.models import ZodforgeBaseModel
    >>> from pydantic import Field
    >>>
    >>> class Artifact(ZodforgeBaseModel):
    ...     name: str
    ...     complexity: int = Field(default=0, ge=0)
    >>>
    >>> Artifact(name="Pet").model_dump()
    {'name': 'Pet', 'complexity': 0}
"""

from pydantic import BaseModel, ConfigDict


class ZodforgeBaseModel(BaseModel):
    """Base model for zodforge Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable

    Schema nodes read from user documents do not inherit from this base,
    since OpenAPI allows arbitrary vendor extensions.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
