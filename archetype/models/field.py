"""Field — one typed attribute of an entity, with its ordered validations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class Validation(BaseModel):
    """A single validation rule attached to a field.

    ``type`` is one of the text kinds (``minLength``, ``email``, ...) or
    number kinds (``min``, ``integer``, ...).  ``value`` carries the
    argument where the kind takes one (a length, a bound, a pattern).
    """

    model_config = ConfigDict(frozen=True)

    type: str
    value: Any = None


class Field(BaseModel):
    """Compiled field configuration.

    Computed fields carry ``return_type``, ``source_fields`` and
    ``expression`` instead of storage semantics.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    required: bool = False
    unique: bool = False
    default: Any = None
    """Default value; ``None`` means no default."""

    label: str | None = None
    validations: list[Validation] = PydanticField(default_factory=list)

    enum_values: list[str] | None = None
    """Allowed values for ``enum`` fields."""

    return_type: str | None = None
    source_fields: list[str] = PydanticField(default_factory=list)
    expression: str | None = None

    @property
    def is_computed(self) -> bool:
        return self.type == "computed"

    @property
    def is_stored(self) -> bool:
        """Whether the field has a storage column and appears in create/update input."""
        return not self.is_computed

    def has_validation(self, kind: str) -> bool:
        return any(v.type == kind for v in self.validations)

    def get_validation(self, kind: str) -> Validation | None:
        for validation in self.validations:
            if validation.type == kind:
                return validation
        return None
