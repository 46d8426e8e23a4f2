"""Field builders for entity definitions.

Every method returns a new builder wrapping a new frozen :class:`Field`;
no builder is ever mutated, so partially built fields can be shared and
reused freely::

    email = text().required().unique().email().max(255)
    optional_email = email.optional()   # ``email`` is unchanged
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Sequence, TypeVar

from archetype.models.field import Field, Validation

B = TypeVar("B", bound="FieldBuilder")


class FieldBuilder:
    """Base builder: the modifiers every field kind supports."""

    __slots__ = ("_config",)

    def __init__(self, config: Field) -> None:
        self._config = config

    @property
    def config(self) -> Field:
        """The compiled, immutable field configuration."""
        return self._config

    def _with(self: B, **changes: Any) -> B:
        return type(self)(self._config.model_copy(update=changes))

    def _validated(self: B, kind: str, value: Any = None) -> B:
        validations = [*self._config.validations, Validation(type=kind, value=value)]
        return self._with(validations=validations)

    def required(self: B) -> B:
        return self._with(required=True)

    def optional(self: B) -> B:
        return self._with(required=False)

    def unique(self: B) -> B:
        return self._with(unique=True)

    def default(self: B, value: Any) -> B:
        return self._with(default=value)

    def label(self: B, value: str) -> B:
        return self._with(label=value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"


class TextFieldBuilder(FieldBuilder):
    __slots__ = ()

    def min(self, length: int) -> TextFieldBuilder:
        return self._validated("minLength", length)

    def max(self, length: int) -> TextFieldBuilder:
        return self._validated("maxLength", length)

    def email(self) -> TextFieldBuilder:
        return self._validated("email")

    def url(self) -> TextFieldBuilder:
        return self._validated("url")

    def regex(self, pattern: str | re.Pattern[str]) -> TextFieldBuilder:
        source = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
        return self._validated("regex", source)

    def one_of(self, values: Iterable[str]) -> TextFieldBuilder:
        return self._validated("oneOf", list(values))

    def trim(self) -> TextFieldBuilder:
        return self._validated("trim")

    def lowercase(self) -> TextFieldBuilder:
        return self._validated("lowercase")

    def uppercase(self) -> TextFieldBuilder:
        return self._validated("uppercase")


class NumberFieldBuilder(FieldBuilder):
    __slots__ = ()

    def min(self, value: float) -> NumberFieldBuilder:
        return self._validated("min", value)

    def max(self, value: float) -> NumberFieldBuilder:
        return self._validated("max", value)

    def integer(self) -> NumberFieldBuilder:
        return self._validated("integer")

    def positive(self) -> NumberFieldBuilder:
        return self._validated("positive")


class BooleanFieldBuilder(FieldBuilder):
    __slots__ = ()


class DateFieldBuilder(FieldBuilder):
    """Date field; ``default("now")`` means the current time at insert."""

    __slots__ = ()


class EnumFieldBuilder(FieldBuilder):
    __slots__ = ()


class ComputedFieldBuilder(FieldBuilder):
    """Derived, non-stored field.  Only ``label`` is meaningful."""

    __slots__ = ()


def text() -> TextFieldBuilder:
    """Create a text field builder.

    Example::

        text().required().unique().email().min(5).max(255).trim().lowercase()
    """
    return TextFieldBuilder(Field(type="text"))


def number() -> NumberFieldBuilder:
    """Create a number field builder, e.g. ``number().required().min(0).integer()``."""
    return NumberFieldBuilder(Field(type="number"))


def boolean() -> BooleanFieldBuilder:
    return BooleanFieldBuilder(Field(type="boolean"))


def date() -> DateFieldBuilder:
    return DateFieldBuilder(Field(type="date"))


def enum_field(*values: str) -> EnumFieldBuilder:
    """Create an enum field restricted to *values*.

    Example::

        enum_field("draft", "published", "archived").required().default("draft")
    """
    return EnumFieldBuilder(Field(type="enum", enum_values=list(values)))


def computed(*, type: str, source: Sequence[str], get: str) -> ComputedFieldBuilder:
    """Create a computed field derived from other fields of the same entity.

    Parameters
    ----------
    type:
        Return type: ``text``, ``number``, ``boolean`` or ``date``.
    source:
        Names of the fields the expression reads.
    get:
        Expression evaluated by the generated code.
    """
    return ComputedFieldBuilder(
        Field(
            type="computed",
            return_type=type,
            source_fields=list(source),
            expression=get,
        )
    )
