"""Mapper — pure translation between desired state and remote state.

Drafting builds a remote payload from what the user declared; importing
builds the declared shape from what the remote system holds. Both directions
return new objects and never modify their inputs. Any failure aborts the
whole translation, so a partial model is never produced.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cmsync.errors import InvalidDeclarationError, UnsupportedDefaultValueTypeError
from cmsync.models.content_model import (
    ArrayItems,
    ContentModel,
    Control,
    DefaultValue,
    Field,
    FieldType,
    SidebarWidget,
)
from cmsync.models.remote import (
    EditorInterface,
    RemoteArrayItems,
    RemoteContentModel,
    RemoteControl,
    RemoteField,
    RemoteSidebarWidget,
)
from cmsync.models.validation import draft_validations, import_validations

logger = logging.getLogger(__name__)


# --- Draft (desired -> remote) ---


def draft_items(items: ArrayItems) -> RemoteArrayItems:
    return RemoteArrayItems(
        type=items.type,
        link_type=items.link_type,
        validations=draft_validations(items.validations),
    )


def draft_field(f: Field) -> RemoteField:
    """Build the remote field for a declared field.

    The link type is only sent when it is set and non-empty; an unset link
    type and an empty one are different things on the wire.
    """
    remote = RemoteField(
        id=f.id,
        name=f.name,
        type=f.type,
        required=f.required,
        localized=f.localized,
        disabled=f.disabled,
        omitted=f.omitted,
        validations=draft_validations(f.validations),
    )

    if f.link_type:
        remote.link_type = f.link_type

    if f.type == FieldType.ARRAY:
        if f.items is None:
            raise InvalidDeclarationError(f"field '{f.id}' is an Array but declares no items")
        remote.items = draft_items(f.items)

    if f.default_value is not None:
        try:
            remote.default_value = f.default_value.draft()
        except InvalidDeclarationError as e:
            raise InvalidDeclarationError(f"field '{f.id}': {e}") from e

    return remote


def draft_content_model(model: ContentModel) -> RemoteContentModel:
    """Build the remote content type for a declared model.

    Identity is carried only once the model has been created; the description
    only when it is declared.
    """
    fields = [draft_field(f) for f in model.fields]

    remote = RemoteContentModel(
        name=model.name,
        display_field=model.display_field,
        fields=fields,
    )

    if model.id:
        remote.id = model.id
        remote.version = model.version

    if model.description is not None:
        remote.description = model.description

    return remote


def decode_sidebar_settings(text: str | None) -> dict[str, Any]:
    """Decode the JSON text of a sidebar widget's settings into a dict."""
    if not text:
        return {}
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"sidebar settings must be a JSON object, got {type(data).__name__}")
    return data


def draft_control(f: Field) -> RemoteControl:
    control = RemoteControl(field_id=f.id)
    if f.control is not None:
        control.widget_id = f.control.widget_id
        control.widget_namespace = f.control.widget_namespace
        if f.control.settings is not None:
            control.settings = dict(f.control.settings)
    return control


def draft_sidebar_widget(widget: SidebarWidget) -> RemoteSidebarWidget:
    """Build a remote sidebar entry. Disabled widgets never carry settings."""
    remote = RemoteSidebarWidget(
        widget_id=widget.widget_id,
        widget_namespace=widget.widget_namespace,
        disabled=widget.disabled,
    )
    if not widget.disabled:
        try:
            remote.settings = decode_sidebar_settings(widget.settings)
        except ValueError as e:
            raise InvalidDeclarationError(
                f"sidebar widget '{widget.widget_id}' has invalid settings: {e}"
            ) from e
    return remote


def draft_editor_interface(
    model: ContentModel, base: EditorInterface | None = None
) -> EditorInterface:
    """Build the companion fragment for a declared model.

    Returns a new fragment instead of rewriting ``base``; only its version is
    carried over, so the write that follows is checked against it. Controls
    follow the declared field order, one per field, and the sidebar follows
    the declared sidebar order.
    """
    return EditorInterface(
        controls=[draft_control(f) for f in model.fields],
        sidebar=[draft_sidebar_widget(s) for s in model.sidebar],
        version=base.version if base is not None else model.version_controls,
    )


# --- Import (remote -> desired) ---


def import_default_value(values: dict[str, Any] | None) -> DefaultValue | None:
    """Infer the typed default-value map from a remote one.

    Every entry is checked: the map must hold only strings or only booleans.
    """
    if not values:
        return None

    kinds = {type(v) for v in values.values()}

    if kinds == {str}:
        return DefaultValue(string=dict(values))

    if kinds == {bool}:
        return DefaultValue(boolean=dict(values))

    names = ", ".join(sorted(k.__name__ for k in kinds))
    raise UnsupportedDefaultValueTypeError(
        f"the default value type(s) {names} are not supported"
    )


def import_items(items: RemoteArrayItems) -> ArrayItems:
    return ArrayItems(
        type=items.type,
        link_type=items.link_type,
        validations=import_validations(items.validations),
    )


def import_control(field_id: str, controls: list[RemoteControl]) -> Control | None:
    """Find the control bound to ``field_id``, if it names a widget."""
    for control in controls:
        if control.field_id != field_id:
            continue
        if not control.widget_id:
            return None
        return Control(
            widget_id=control.widget_id,
            widget_namespace=control.widget_namespace,
            settings=dict(control.settings) if control.settings is not None else None,
        )
    return None


def import_field(remote: RemoteField, controls: list[RemoteControl] | None = None) -> Field:
    """Build the declared field for a remote one and its editor control."""
    f = Field(
        id=remote.id,
        name=remote.name,
        type=remote.type,
        link_type=remote.link_type or None,
        required=remote.required,
        localized=remote.localized,
        disabled=remote.disabled,
        omitted=remote.omitted,
        default_value=import_default_value(remote.default_value),
        validations=import_validations(remote.validations),
    )

    if remote.type == FieldType.ARRAY:
        if remote.items is None:
            logger.warning("remote Array field '%s' carries no items", remote.id)
        else:
            f.items = import_items(remote.items)

    f.control = import_control(remote.id, controls or [])

    return f


def import_sidebar_widget(remote: RemoteSidebarWidget) -> SidebarWidget:
    settings = "{}"
    if remote.settings is not None:
        settings = json.dumps(remote.settings, sort_keys=True)
    return SidebarWidget(
        widget_id=remote.widget_id,
        widget_namespace=remote.widget_namespace,
        settings=settings,
        disabled=remote.disabled,
    )


def import_content_model(
    remote: RemoteContentModel, editor_interface: EditorInterface | None = None
) -> ContentModel:
    """Build the declared model from a content type and its editor interface.

    The editor interface may not exist yet (a freshly created content type);
    in that case fields import without controls, the sidebar is empty and
    ``version_controls`` is 0.
    """
    controls: list[RemoteControl] = []
    sidebar: list[RemoteSidebarWidget] = []
    version_controls = 0

    if editor_interface is not None:
        controls = editor_interface.controls
        sidebar = editor_interface.sidebar
        version_controls = editor_interface.version

    return ContentModel(
        id=remote.id,
        version=remote.version,
        name=remote.name,
        display_field=remote.display_field,
        description=remote.description,
        fields=[import_field(f, controls) for f in remote.fields],
        sidebar=[import_sidebar_widget(s) for s in sidebar],
        version_controls=version_controls,
    )
