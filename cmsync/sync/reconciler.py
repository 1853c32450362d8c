"""Reconciler — drive one read, compare, write cycle per content model.

``plan`` reads the remote content type and editor interface, compares them
with the declared model and drafts the payloads to send. ``apply`` sends
them using the versions observed during ``plan``: if anything wrote to the
remote in between, the store raises ``ConflictError`` and nothing is
retried here. The caller re-plans.

Mapping errors raised while drafting abort the cycle before any write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from cmsync.errors import NotFoundError
from cmsync.models.content_model import ContentModel
from cmsync.models.remote import EditorInterface, RemoteContentModel
from cmsync.sync.drift import DriftDetector, DriftReport, DriftType
from cmsync.sync.mapper import (
    draft_content_model,
    draft_editor_interface,
    import_content_model,
)
from cmsync.sync.store import RemoteStore

logger = logging.getLogger(__name__)

_EDITOR_INTERFACE_DRIFT = {DriftType.CONTROLS, DriftType.SIDEBAR}


class PlanAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


@dataclass
class ReconcilePlan:
    """What one cycle will do for a declared model."""

    model: ContentModel
    action: PlanAction
    content_type: RemoteContentModel
    editor_interface: EditorInterface | None = None
    drift: DriftReport | None = None
    observed_version: int = 0
    observed_controls_version: int = 0
    write_content_type: bool = False
    write_editor_interface: bool = False

    @property
    def needs_write(self) -> bool:
        return self.write_content_type or self.write_editor_interface

    def summary(self) -> str:
        name = self.model.id or self.model.name
        if self.action == PlanAction.CREATE:
            return f"{name}: will be created"
        if self.action == PlanAction.NOOP:
            return f"{name}: up to date"
        parts = []
        if self.write_content_type:
            parts.append("content type")
        if self.write_editor_interface:
            parts.append("editor interface")
        return f"{name}: will update {' and '.join(parts)}"


class Reconciler:
    """Reconciles declared content models against a remote store."""

    def __init__(self, store: RemoteStore):
        self.store = store

    def read(self, model_id: str) -> ContentModel:
        """Import the current remote state of a content model."""
        remote = self.store.get_content_type(model_id)
        editor_interface = self.store.get_editor_interface(model_id)
        return import_content_model(remote, editor_interface)

    def plan(self, model: ContentModel) -> ReconcilePlan:
        """Compare a declared model with the remote and draft what to send."""
        content_type = draft_content_model(model)

        remote = None
        if model.id:
            try:
                remote = self.store.get_content_type(model.id)
            except NotFoundError:
                logger.info("Content type %s not found remotely; planning a create", model.id)

        if remote is None:
            return ReconcilePlan(
                model=model,
                action=PlanAction.CREATE,
                content_type=content_type,
                editor_interface=(
                    draft_editor_interface(model, EditorInterface())
                    if model.manage_field_controls
                    else None
                ),
                write_content_type=True,
                write_editor_interface=model.manage_field_controls,
            )

        current_ei = self.store.get_editor_interface(model.id)
        report = DriftDetector(include_controls=model.manage_field_controls).check(
            model, remote, current_ei
        )

        plan = ReconcilePlan(
            model=model,
            action=PlanAction.NOOP,
            content_type=content_type,
            drift=report,
            observed_version=remote.version,
            observed_controls_version=current_ei.version if current_ei is not None else 0,
        )

        if model.manage_field_controls:
            plan.editor_interface = draft_editor_interface(model, current_ei or EditorInterface())

        if report.has_drift:
            plan.action = PlanAction.UPDATE
            plan.write_content_type = bool(
                set(report.drift_types) - _EDITOR_INTERFACE_DRIFT
            )
            plan.write_editor_interface = bool(
                set(report.drift_types) & _EDITOR_INTERFACE_DRIFT
            )

        logger.debug("Plan for %s: %s", model.id, report.summary())
        return plan

    def apply(self, plan: ReconcilePlan) -> ContentModel:
        """Send the writes of a plan and return the re-imported remote state."""
        model = plan.model

        if plan.action == PlanAction.NOOP:
            return self.read(model.id)

        if plan.action == PlanAction.CREATE:
            created = self.store.create_content_type(plan.content_type)
            model_id = created.id
            controls_version = 0
        else:
            model_id = model.id
            controls_version = plan.observed_controls_version
            if plan.write_content_type:
                self.store.update_content_type(model_id, plan.observed_version, plan.content_type)

        if plan.write_editor_interface and plan.editor_interface is not None:
            self.store.update_editor_interface(model_id, controls_version, plan.editor_interface)

        return self.read(model_id)

    def reconcile(self, model: ContentModel) -> tuple[ReconcilePlan, ContentModel]:
        """Plan and apply in one go."""
        plan = self.plan(model)
        return plan, self.apply(plan)
