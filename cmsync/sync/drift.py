"""Drift detection — decide whether remote state already matches desired state.

Drift happens when:
1. A model attribute (name, display field, description) differs
2. The set of fields differs (added, removed, renamed ids)
3. A field's content differs (type, flags, validations, items, default value)
4. A field is unchanged but sits at another position
5. The editor controls bound to fields differ
6. The sidebar widgets differ, including their order

Fields are matched by id, and position is checked as a separate rule, so a
pure reorder is distinguishable from a content change. Both still count as
drift. Every comparison here is total: it returns a boolean and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cmsync.errors import InvalidDeclarationError, UnsupportedVariantError
from cmsync.models.content_model import ArrayItems, ContentModel, Field
from cmsync.models.remote import (
    EditorInterface,
    RemoteArrayItems,
    RemoteContentModel,
    RemoteField,
)
from cmsync.models.validation import RemoteValidation, Validation, draft_validation
from cmsync.sync.mapper import decode_sidebar_settings


class DriftType:
    ATTRIBUTES = "attribute_drift"  # Name, display field or description changed
    FIELD_SET = "field_set_drift"  # Fields added, removed or re-keyed
    FIELD_CONTENT = "field_content_drift"  # Same field id, different content
    FIELD_ORDER = "field_order_drift"  # Same field, different position
    CONTROLS = "control_drift"  # Editor controls differ
    SIDEBAR = "sidebar_drift"  # Sidebar widgets differ


# --- Comparators ---


def _scalar_maps_equal(a: dict[str, Any], b: dict[str, Any]) -> bool:
    """Compare two flat maps by value and by type (``True`` is not ``1``)."""
    if a.keys() != b.keys():
        return False
    return all(type(a[k]) is type(b[k]) and a[k] == b[k] for k in a)


def validations_equal(validations: list[Validation], remote: list[RemoteValidation]) -> bool:
    """Positional comparison: the i-th declared rule must equal the i-th remote rule."""
    if len(validations) != len(remote):
        return False

    for validation, remote_validation in zip(validations, remote):
        try:
            drafted = draft_validation(validation)
        except UnsupportedVariantError:
            return False
        if drafted != remote_validation:
            return False

    return True


def items_equal(items: ArrayItems, remote: RemoteArrayItems | None) -> bool:
    if remote is None:
        return False

    if items.type != remote.type:
        return False

    if items.link_type != remote.link_type:
        return False

    return validations_equal(items.validations, remote.validations)


def field_equal(f: Field, remote: RemoteField) -> bool:
    """Compare a declared field with a remote one.

    An unset link type and an empty one compare equal here. Array items are
    compared whenever either side has them, and the default value whenever
    the declared field has one.
    """
    if remote.type != f.type:
        return False

    if remote.id != f.id:
        return False

    if remote.name != f.name:
        return False

    if (remote.link_type or "") != (f.link_type or ""):
        return False

    if remote.required != f.required:
        return False

    if remote.omitted != f.omitted:
        return False

    if remote.disabled != f.disabled:
        return False

    if remote.localized != f.localized:
        return False

    if f.items is None and remote.items is not None:
        return False

    if f.items is not None and not items_equal(f.items, remote.items):
        return False

    if not validations_equal(f.validations, remote.validations):
        return False

    if f.default_value is not None:
        try:
            declared = f.default_value.draft()
        except InvalidDeclarationError:
            return False
        if not _scalar_maps_equal(declared, remote.default_value or {}):
            return False

    return True


def _index_of_field(fields: list[RemoteField], field_id: str) -> int:
    for idx, f in enumerate(fields):
        if f.id == field_id:
            return idx
    return -1


def content_model_equal(model: ContentModel, remote: RemoteContentModel) -> bool:
    """Compare a declared model with a remote content type.

    Each declared field is looked up by id, compared with ``field_equal``,
    and must also sit at the same index as remotely.
    """
    if model.description != remote.description:
        return False

    if model.name != remote.name:
        return False

    if model.display_field != remote.display_field:
        return False

    if len(model.fields) != len(remote.fields):
        return False

    for idx_declared, f in enumerate(model.fields):
        idx = _index_of_field(remote.fields, f.id)

        if idx == -1:
            return False

        if not field_equal(f, remote.fields[idx]):
            return False

        # same field, different position
        if idx != idx_declared:
            return False

    return True


def controls_equal(model: ContentModel, editor_interface: EditorInterface) -> bool:
    """Compare declared controls with remote ones, matched by field id."""
    configured = [c for c in editor_interface.controls if c.is_configured]
    controlled = model.controlled_fields

    if len(configured) != len(controlled):
        return False

    for f in controlled:
        control = next((c for c in configured if c.field_id == f.id), None)

        if control is None:
            return False

        if f.control.widget_id != control.widget_id:
            return False

        if f.control.widget_namespace != control.widget_namespace:
            return False

        if f.control.settings is None and control.settings is not None:
            return False

        if f.control.settings is not None and f.control.settings != control.settings:
            return False

    return True


def sidebar_equal(model: ContentModel, editor_interface: EditorInterface) -> bool:
    """Compare declared sidebar widgets with remote ones, position included."""
    remote_sidebar = editor_interface.sidebar

    if len(model.sidebar) != len(remote_sidebar):
        return False

    remote_ids = [s.widget_id for s in remote_sidebar]

    for idx_declared, widget in enumerate(model.sidebar):
        if widget.widget_id not in remote_ids:
            return False

        idx = remote_ids.index(widget.widget_id)

        # same widget, different position
        if idx != idx_declared:
            return False

        remote = remote_sidebar[idx]

        if remote.disabled != widget.disabled:
            return False

        if remote.widget_namespace != widget.widget_namespace:
            return False

        # settings are never sent for disabled widgets
        if widget.disabled:
            continue

        try:
            settings = decode_sidebar_settings(widget.settings)
        except ValueError:
            return False

        if settings != (remote.settings or {}):
            return False

    return True


def editor_interface_equal(model: ContentModel, editor_interface: EditorInterface | None) -> bool:
    """Compare the declared controls and sidebar with the companion fragment."""
    if editor_interface is None:
        editor_interface = EditorInterface()
    return controls_equal(model, editor_interface) and sidebar_equal(model, editor_interface)


# --- Reporting ---


@dataclass
class DriftReport:
    """Report of detected drift for one content model."""

    model_id: str
    drift_types: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return len(self.drift_types) > 0

    def add(self, drift_type: str, detail: str) -> None:
        if drift_type not in self.drift_types:
            self.drift_types.append(drift_type)
        self.details.append(detail)

    def summary(self) -> str:
        if not self.has_drift:
            return f"{self.model_id}: no drift detected"
        types = ", ".join(self.drift_types)
        return f"{self.model_id}: DRIFT [{types}]"


class DriftDetector:
    """Explains drift between a declared model and its remote counterpart.

    Uses the same rules as ``content_model_equal`` and
    ``editor_interface_equal``, but keeps going after the first difference
    and records what kind of drift each one is.
    """

    def __init__(self, include_controls: bool = True):
        self.include_controls = include_controls

    def check(
        self,
        model: ContentModel,
        remote: RemoteContentModel,
        editor_interface: EditorInterface | None = None,
    ) -> DriftReport:
        report = DriftReport(model_id=model.id or remote.id or model.name)

        self._check_attributes(model, remote, report)
        self._check_fields(model, remote, report)

        if self.include_controls:
            ei = editor_interface or EditorInterface()
            if not controls_equal(model, ei):
                report.add(DriftType.CONTROLS, "Field controls differ from the editor interface.")
            if not sidebar_equal(model, ei):
                report.add(DriftType.SIDEBAR, "Sidebar widgets differ from the editor interface.")

        return report

    def _check_attributes(self, model: ContentModel, remote: RemoteContentModel, report: DriftReport):
        for attr in ("name", "display_field", "description"):
            declared = getattr(model, attr)
            current = getattr(remote, attr)
            if declared != current:
                report.add(DriftType.ATTRIBUTES, f"{attr}: remote {current!r}, declared {declared!r}")

    def _check_fields(self, model: ContentModel, remote: RemoteContentModel, report: DriftReport):
        if len(model.fields) != len(remote.fields):
            report.add(
                DriftType.FIELD_SET,
                f"Remote has {len(remote.fields)} field(s), declared {len(model.fields)}",
            )

        declared_ids = {f.id for f in model.fields}
        for f in remote.fields:
            if f.id not in declared_ids:
                report.add(DriftType.FIELD_SET, f"Field '{f.id}' exists remotely but is not declared")

        for idx_declared, f in enumerate(model.fields):
            idx = _index_of_field(remote.fields, f.id)

            if idx == -1:
                report.add(DriftType.FIELD_SET, f"Field '{f.id}' is declared but missing remotely")
                continue

            if not field_equal(f, remote.fields[idx]):
                report.add(DriftType.FIELD_CONTENT, f"Field '{f.id}' differs from remote")

            if idx != idx_declared:
                report.add(
                    DriftType.FIELD_ORDER,
                    f"Field '{f.id}' is at position {idx} remotely, declared at {idx_declared}",
                )
