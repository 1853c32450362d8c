"""Declarations — read and write desired state as YAML.

A declaration file holds a top-level ``content_types`` list. Keys use
snake_case; see ``content_model_from_dict`` for the accepted shape.
``content_model_to_dict`` is the inverse and is what ``cmsync import`` writes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from cmsync.errors import InvalidDeclarationError
from cmsync.models.content_model import (
    ArrayItems,
    ContentModel,
    Control,
    DefaultValue,
    Field,
    FIELD_TYPES,
    SidebarWidget,
)
from cmsync.models.validation import Regexp, Size, Validation


def load_declarations(path: str | Path) -> list[ContentModel]:
    """Load every content model declared in a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or "content_types" not in data:
        raise InvalidDeclarationError(f"{path}: missing top-level 'content_types' key")

    return [content_model_from_dict(entry) for entry in data["content_types"] or []]


def dump_declarations(models: list[ContentModel]) -> str:
    return yaml.safe_dump(
        {"content_types": [content_model_to_dict(m) for m in models]},
        sort_keys=False,
    )


# --- dict -> model ---


def _size_from_dict(data: dict | None) -> Size | None:
    if data is None:
        return None
    return Size(min=data.get("min"), max=data.get("max"))


def validation_from_dict(data: dict) -> Validation:
    regexp = data.get("regexp")
    return Validation(
        unique=data.get("unique"),
        size=_size_from_dict(data.get("size")),
        range=_size_from_dict(data.get("range")),
        asset_file_size=_size_from_dict(data.get("asset_file_size")),
        regexp=Regexp(pattern=regexp["pattern"]) if regexp is not None else None,
        link_content_type=list(data.get("link_content_type") or []),
        link_mimetype_group=list(data.get("link_mimetype_group") or []),
        in_values=list(data.get("in") or []),
        enabled_marks=list(data.get("enabled_marks") or []),
        enabled_node_types=list(data.get("enabled_node_types") or []),
        message=data.get("message"),
    )


def _default_value_from_dict(field_id: str, data: dict | None) -> DefaultValue | None:
    if data is None:
        return None
    if data.get("string") is not None and data.get("bool") is not None:
        raise InvalidDeclarationError(
            f"field {field_id!r} declares both a string and a bool default value"
        )
    return DefaultValue(string=data.get("string"), boolean=data.get("bool"))


def field_from_dict(data: dict) -> Field:
    items = data.get("items")
    default_value = data.get("default_value")
    control = data.get("control")

    try:
        field_id = data["id"]
    except KeyError:
        raise InvalidDeclarationError(f"field {data.get('name', '?')!r} has no 'id'") from None

    field_type = data.get("type", "")
    if field_type not in FIELD_TYPES:
        raise InvalidDeclarationError(f"field {field_id!r} has unknown type {field_type!r}")

    return Field(
        id=field_id,
        name=data.get("name", field_id),
        type=field_type,
        link_type=data.get("link_type"),
        required=data.get("required", False),
        localized=data.get("localized", False),
        disabled=data.get("disabled", False),
        omitted=data.get("omitted", False),
        validations=[validation_from_dict(v) for v in (data.get("validations") or [])],
        items=(
            ArrayItems(
                type=items.get("type", ""),
                link_type=items.get("link_type"),
                validations=[validation_from_dict(v) for v in (items.get("validations") or [])],
            )
            if items is not None
            else None
        ),
        default_value=_default_value_from_dict(field_id, default_value),
        control=(
            Control(
                widget_id=control["widget_id"],
                widget_namespace=control.get("widget_namespace"),
                settings=control.get("settings"),
            )
            if control is not None
            else None
        ),
    )


def sidebar_widget_from_dict(data: dict) -> SidebarWidget:
    settings = data.get("settings", "{}")
    if not isinstance(settings, str):
        settings = json.dumps(settings, sort_keys=True)
    return SidebarWidget(
        widget_id=data["widget_id"],
        widget_namespace=data.get("widget_namespace", ""),
        settings=settings,
        disabled=data.get("disabled", False),
    )


def content_model_from_dict(data: dict) -> ContentModel:
    if not data.get("id"):
        raise InvalidDeclarationError(
            f"content type {data.get('name', '?')!r} has no 'id'"
        )

    model = ContentModel(
        id=data["id"],
        name=data["name"],
        display_field=data.get("display_field", ""),
        description=data.get("description"),
        manage_field_controls=data.get("manage_field_controls", True),
        fields=[field_from_dict(f) for f in (data.get("fields") or [])],
        sidebar=[sidebar_widget_from_dict(s) for s in (data.get("sidebar") or [])],
    )

    ids = [f.id for f in model.fields]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise InvalidDeclarationError(
            f"content type {model.name!r} declares duplicate field ids: {', '.join(duplicates)}"
        )

    return model


# --- model -> dict ---


def _size_to_dict(size: Size) -> dict:
    return {k: v for k, v in (("min", size.min), ("max", size.max)) if v is not None}


def validation_to_dict(v: Validation) -> dict:
    data: dict[str, Any] = {}
    if v.unique is not None:
        data["unique"] = v.unique
    for key in ("size", "range", "asset_file_size"):
        size = getattr(v, key)
        if size is not None:
            data[key] = _size_to_dict(size)
    if v.regexp is not None:
        data["regexp"] = {"pattern": v.regexp.pattern}
    for key, values in (
        ("link_content_type", v.link_content_type),
        ("link_mimetype_group", v.link_mimetype_group),
        ("in", v.in_values),
        ("enabled_marks", v.enabled_marks),
        ("enabled_node_types", v.enabled_node_types),
    ):
        if values:
            data[key] = list(values)
    if v.message is not None:
        data["message"] = v.message
    return data


def field_to_dict(f: Field) -> dict:
    data: dict[str, Any] = {"id": f.id, "name": f.name, "type": f.type}
    if f.link_type:
        data["link_type"] = f.link_type
    for flag in ("required", "localized", "disabled", "omitted"):
        if getattr(f, flag):
            data[flag] = True
    if f.validations:
        data["validations"] = [validation_to_dict(v) for v in f.validations]
    if f.items is not None:
        items: dict[str, Any] = {"type": f.items.type}
        if f.items.link_type is not None:
            items["link_type"] = f.items.link_type
        if f.items.validations:
            items["validations"] = [validation_to_dict(v) for v in f.items.validations]
        data["items"] = items
    if f.default_value is not None:
        default_value = {}
        if f.default_value.string is not None:
            default_value["string"] = dict(f.default_value.string)
        if f.default_value.boolean is not None:
            default_value["bool"] = dict(f.default_value.boolean)
        data["default_value"] = default_value
    if f.control is not None:
        control: dict[str, Any] = {"widget_id": f.control.widget_id}
        if f.control.widget_namespace is not None:
            control["widget_namespace"] = f.control.widget_namespace
        if f.control.settings is not None:
            control["settings"] = dict(f.control.settings)
        data["control"] = control
    return data


def sidebar_widget_to_dict(widget: SidebarWidget) -> dict:
    try:
        settings: Any = json.loads(widget.settings)
    except ValueError:
        settings = widget.settings
    return {
        "widget_id": widget.widget_id,
        "widget_namespace": widget.widget_namespace,
        "settings": settings,
        "disabled": widget.disabled,
    }


def content_model_to_dict(model: ContentModel) -> dict:
    data: dict[str, Any] = {"id": model.id, "name": model.name, "display_field": model.display_field}
    if model.description is not None:
        data["description"] = model.description
    if not model.manage_field_controls:
        data["manage_field_controls"] = False
    data["fields"] = [field_to_dict(f) for f in model.fields]
    if model.sidebar:
        data["sidebar"] = [sidebar_widget_to_dict(s) for s in model.sidebar]
    return data
