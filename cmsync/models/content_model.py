"""Desired-state models for a content model.

These are what a user declares: a content model with its ordered fields,
each field's validations, array item spec, default value and editor control,
plus the ordered sidebar widgets. Instances are inputs to a reconciliation
cycle and are never mutated by it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cmsync.errors import InvalidDeclarationError
from cmsync.models.validation import Validation


class FieldType:
    SYMBOL = "Symbol"
    TEXT = "Text"
    RICH_TEXT = "RichText"
    INTEGER = "Integer"
    NUMBER = "Number"
    DATE = "Date"
    LOCATION = "Location"
    BOOLEAN = "Boolean"
    OBJECT = "Object"
    LINK = "Link"
    RESOURCE_LINK = "ResourceLink"
    ARRAY = "Array"


FIELD_TYPES = {
    FieldType.SYMBOL,
    FieldType.TEXT,
    FieldType.RICH_TEXT,
    FieldType.INTEGER,
    FieldType.NUMBER,
    FieldType.DATE,
    FieldType.LOCATION,
    FieldType.BOOLEAN,
    FieldType.OBJECT,
    FieldType.LINK,
    FieldType.RESOURCE_LINK,
    FieldType.ARRAY,
}


# --- Field parts ---


@dataclass
class ArrayItems:
    """Element spec of an ``Array`` field."""

    type: str
    link_type: str | None = None
    validations: list[Validation] = field(default_factory=list)


@dataclass
class DefaultValue:
    """Per-locale default value; exactly one of the two maps may be set."""

    string: dict[str, str] | None = None
    boolean: dict[str, bool] | None = None

    def draft(self) -> dict[str, Any]:
        """Return the locale map to send, or raise ``InvalidDeclarationError``.

        The remote side only accepts a map of strings or a map of booleans.
        """
        if self.string is not None and self.boolean is not None:
            raise InvalidDeclarationError("default value declares both string and bool maps")

        if self.string is not None:
            if not all(isinstance(v, str) for v in self.string.values()):
                raise InvalidDeclarationError("string default value holds non-string entries")
            return dict(self.string)

        if self.boolean is not None:
            if not all(isinstance(v, bool) for v in self.boolean.values()):
                raise InvalidDeclarationError("bool default value holds non-bool entries")
            return dict(self.boolean)

        return {}


@dataclass
class Control:
    """Editor widget bound to a field. ``settings`` is widget-specific."""

    widget_id: str
    widget_namespace: str | None = None
    settings: dict[str, Any] | None = None


# --- Field ---


@dataclass
class Field:
    id: str
    name: str
    type: str
    link_type: str | None = None
    required: bool = False
    localized: bool = False
    disabled: bool = False
    omitted: bool = False
    validations: list[Validation] = field(default_factory=list)
    items: ArrayItems | None = None
    default_value: DefaultValue | None = None
    control: Control | None = None


# --- Sidebar ---


@dataclass
class SidebarWidget:
    """An entry of the editor sidebar. ``settings`` is raw JSON text."""

    widget_id: str
    widget_namespace: str
    settings: str = "{}"
    disabled: bool = False


# --- The content model ---


@dataclass
class ContentModel:
    """A declared content model.

    ``id`` is empty until the model has been created remotely. ``version``
    and ``version_controls`` are the last observed versions of the content
    type and of its editor interface. Field order and sidebar order are both
    significant.
    """

    name: str
    display_field: str = ""
    description: str | None = None
    fields: list[Field] = field(default_factory=list)
    sidebar: list[SidebarWidget] = field(default_factory=list)
    id: str = ""
    version: int = 0
    version_controls: int = 0
    manage_field_controls: bool = True

    @property
    def controlled_fields(self) -> list[Field]:
        return [f for f in self.fields if f.control is not None]
