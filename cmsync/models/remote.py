"""Remote-state models — the authoritative copy as the remote system stores it.

A content type and its editor interface are two independently versioned
remote objects that describe one logical entity. The editor interface (the
companion fragment) holds one control per field plus the ordered sidebar.

Each model knows its JSON wire shape (``to_payload`` / ``from_payload``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cmsync.models.validation import RemoteValidation, parse_validation


@dataclass
class RemoteArrayItems:
    """Element spec of an ``Array`` field."""

    type: str
    link_type: str | None = None
    validations: list[RemoteValidation] = field(default_factory=list)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"type": self.type}
        if self.link_type is not None:
            payload["linkType"] = self.link_type
        payload["validations"] = [v.to_payload() for v in self.validations]
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> RemoteArrayItems:
        return cls(
            type=data.get("type", ""),
            link_type=data.get("linkType"),
            validations=[parse_validation(v) for v in data.get("validations") or []],
        )


@dataclass
class RemoteField:
    id: str
    name: str
    type: str
    link_type: str | None = None
    required: bool = False
    localized: bool = False
    disabled: bool = False
    omitted: bool = False
    validations: list[RemoteValidation] = field(default_factory=list)
    items: RemoteArrayItems | None = None
    default_value: dict[str, Any] | None = None

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "localized": self.localized,
            "disabled": self.disabled,
            "omitted": self.omitted,
            "validations": [v.to_payload() for v in self.validations],
        }
        if self.link_type is not None:
            payload["linkType"] = self.link_type
        if self.items is not None:
            payload["items"] = self.items.to_payload()
        if self.default_value is not None:
            payload["defaultValue"] = dict(self.default_value)
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> RemoteField:
        items = data.get("items")
        default_value = data.get("defaultValue")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            type=data.get("type", ""),
            link_type=data.get("linkType"),
            required=bool(data.get("required", False)),
            localized=bool(data.get("localized", False)),
            disabled=bool(data.get("disabled", False)),
            omitted=bool(data.get("omitted", False)),
            validations=[parse_validation(v) for v in data.get("validations") or []],
            items=RemoteArrayItems.from_payload(items) if items is not None else None,
            default_value=dict(default_value) if default_value is not None else None,
        )


@dataclass
class RemoteContentModel:
    """A content type as stored remotely. ``id`` is empty before creation."""

    name: str
    display_field: str = ""
    description: str | None = None
    fields: list[RemoteField] = field(default_factory=list)
    id: str = ""
    version: int = 0

    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "name": self.name,
            "displayField": self.display_field,
            "fields": [f.to_payload() for f in self.fields],
        }
        if self.id or self.version:
            payload["sys"] = {"id": self.id, "version": self.version}
        if self.description is not None:
            payload["description"] = self.description
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> RemoteContentModel:
        sys = data.get("sys") or {}
        return cls(
            id=sys.get("id", ""),
            version=int(sys.get("version", 0)),
            name=data.get("name", ""),
            display_field=data.get("displayField", ""),
            description=data.get("description"),
            fields=[RemoteField.from_payload(f) for f in data.get("fields") or []],
        )


# --- Editor interface (companion fragment) ---


@dataclass
class RemoteControl:
    """The editor widget bound to one field."""

    field_id: str
    widget_id: str | None = None
    widget_namespace: str | None = None
    settings: dict[str, Any] | None = None

    @property
    def is_configured(self) -> bool:
        return (
            self.widget_id is not None
            or self.widget_namespace is not None
            or self.settings is not None
        )

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"fieldId": self.field_id}
        if self.widget_id is not None:
            payload["widgetId"] = self.widget_id
        if self.widget_namespace is not None:
            payload["widgetNamespace"] = self.widget_namespace
        if self.settings is not None:
            payload["settings"] = dict(self.settings)
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> RemoteControl:
        settings = data.get("settings")
        return cls(
            field_id=data["fieldId"],
            widget_id=data.get("widgetId"),
            widget_namespace=data.get("widgetNamespace"),
            settings=dict(settings) if settings is not None else None,
        )


@dataclass
class RemoteSidebarWidget:
    widget_id: str
    widget_namespace: str
    settings: dict[str, Any] | None = None
    disabled: bool = False

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "widgetId": self.widget_id,
            "widgetNamespace": self.widget_namespace,
            "disabled": self.disabled,
        }
        if self.settings is not None:
            payload["settings"] = dict(self.settings)
        return payload

    @classmethod
    def from_payload(cls, data: dict) -> RemoteSidebarWidget:
        settings = data.get("settings")
        return cls(
            widget_id=data.get("widgetId", ""),
            widget_namespace=data.get("widgetNamespace", ""),
            settings=dict(settings) if settings is not None else None,
            disabled=bool(data.get("disabled", False)),
        )


@dataclass
class EditorInterface:
    """Companion fragment of a content type: controls + sidebar.

    ``version`` 0 means the fragment has never been written.
    """

    controls: list[RemoteControl] = field(default_factory=list)
    sidebar: list[RemoteSidebarWidget] = field(default_factory=list)
    version: int = 0

    def to_payload(self) -> dict:
        return {
            "sys": {"version": self.version},
            "controls": [c.to_payload() for c in self.controls],
            "sidebar": [s.to_payload() for s in self.sidebar],
        }

    @classmethod
    def from_payload(cls, data: dict) -> EditorInterface:
        sys = data.get("sys") or {}
        return cls(
            controls=[RemoteControl.from_payload(c) for c in data.get("controls") or []],
            sidebar=[RemoteSidebarWidget.from_payload(s) for s in data.get("sidebar") or []],
            version=int(sys.get("version", 0)),
        )
