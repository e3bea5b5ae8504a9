"""Base Pydantic model configuration for ecsuite value types.

All ecsuite models inherit from ECSuiteBaseModel to ensure consistent behavior:
- Immutability (frozen=True): key material and curve parameters never change
  after construction and can be shared across tasks without locking
- Strict validation (extra="forbid") to catch typos and invalid fields
"""

from pydantic import BaseModel, ConfigDict


class ECSuiteBaseModel(BaseModel):
    """Base model for all ecsuite value types.

    Example:
        >>> class Pair(ECSuiteBaseModel):
        ...     r: int
        ...     s: int
        >>> pair = Pair(r=1, s=2)
        >>> pair.s = 3  # Raises ValidationError (frozen)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        use_enum_values=False,
        validate_default=True,
    )
