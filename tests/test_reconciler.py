"""Tests for the plan/apply reconciliation cycle."""

import logging
import tempfile

import pytest

from cmsync.errors import ConflictError, InvalidDeclarationError, UnsupportedVariantError
from cmsync.models.content_model import ContentModel, Control, DefaultValue, Field, SidebarWidget
from cmsync.models.validation import Size, Validation
from cmsync.sync.drift import DriftType
from cmsync.sync.reconciler import PlanAction, Reconciler
from cmsync.sync.store import LocalStore


def _declared(**kwargs) -> ContentModel:
    return ContentModel(
        id="article",
        name="Article",
        display_field="title",
        fields=[
            Field(
                id="title",
                name="Title",
                type="Symbol",
                required=True,
                validations=[Validation(size=Size(max=80))],
                control=Control(widget_id="singleLine", widget_namespace="builtin"),
            ),
            Field(id="body", name="Body", type="Text"),
        ],
        sidebar=[SidebarWidget(widget_id="publication-widget", widget_namespace="sidebar-builtin")],
        **kwargs,
    )


def _reconciler(tmpdir: str) -> Reconciler:
    return Reconciler(LocalStore(tmpdir))


def test_create_then_noop():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)

        plan = reconciler.plan(_declared())
        assert plan.action == PlanAction.CREATE
        assert plan.summary() == "article: will be created"

        result = reconciler.apply(plan)
        assert result.id == "article"
        assert result.version == 1
        assert result.version_controls == 1
        assert result.fields[0].control == Control(widget_id="singleLine", widget_namespace="builtin")

        again = reconciler.plan(_declared())
        assert again.action == PlanAction.NOOP
        assert not again.needs_write
        assert again.summary() == "article: up to date"


def test_create_without_identity():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        model = _declared()
        model.id = ""
        plan, result = reconciler.reconcile(model)
        assert plan.action == PlanAction.CREATE
        assert result.id
        assert reconciler.plan(result).action == PlanAction.NOOP


def test_attribute_change_writes_content_type_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        reconciler.reconcile(_declared())

        plan = reconciler.plan(_declared(description="Long-form posts"))
        assert plan.action == PlanAction.UPDATE
        assert plan.write_content_type
        assert not plan.write_editor_interface
        assert plan.summary() == "article: will update content type"

        result = reconciler.apply(plan)
        assert result.description == "Long-form posts"
        assert result.version == 2
        assert result.version_controls == 1


def test_control_change_writes_editor_interface_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        reconciler.reconcile(_declared())

        model = _declared()
        model.fields[1].control = Control(widget_id="markdown", widget_namespace="builtin")
        plan, result = reconciler.reconcile(model)

        assert plan.drift.drift_types == [DriftType.CONTROLS]
        assert not plan.write_content_type
        assert plan.write_editor_interface
        assert result.version == 1
        assert result.version_controls == 2
        assert result.fields[1].control.widget_id == "markdown"


def test_reorder_is_drift():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        reconciler.reconcile(_declared())

        model = _declared()
        model.fields.reverse()
        plan, result = reconciler.reconcile(model)

        assert DriftType.FIELD_ORDER in plan.drift.drift_types
        assert DriftType.FIELD_CONTENT not in plan.drift.drift_types
        assert [f.id for f in result.fields] == ["body", "title"]
        assert reconciler.plan(model).action == PlanAction.NOOP


def test_concurrent_write_between_plan_and_apply():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        reconciler.reconcile(_declared())

        post = _declared()
        post.name = "Post"
        plan = reconciler.plan(post)

        story = _declared()
        story.name = "Story"
        reconciler.reconcile(story)

        with pytest.raises(ConflictError):
            reconciler.apply(plan)
        assert reconciler.read("article").name == "Story"


def test_missing_remote_is_recreated():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = LocalStore(tmpdir)
        reconciler = Reconciler(store)
        reconciler.reconcile(_declared())
        (store.content_types_dir / "article.json").unlink()
        (store.editor_interfaces_dir / "article.json").unlink()

        plan, result = reconciler.reconcile(_declared())
        assert plan.action == PlanAction.CREATE
        assert result.id == "article"


def test_unmanaged_controls_are_left_alone():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)

        plan, result = reconciler.reconcile(_declared(manage_field_controls=False))
        assert plan.editor_interface is None
        assert result.version_controls == 0
        assert result.fields[0].control is None

        assert reconciler.plan(_declared(manage_field_controls=False)).action == PlanAction.NOOP


def test_mapping_failure_aborts_before_writing():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = LocalStore(tmpdir)
        model = _declared()
        model.fields[1].validations = [Validation()]

        with pytest.raises(UnsupportedVariantError):
            Reconciler(store).reconcile(model)
        assert store.list_content_types() == []


def test_plan_does_not_mutate_declared_model():
    with tempfile.TemporaryDirectory() as tmpdir:
        reconciler = _reconciler(tmpdir)
        model = _declared()
        reconciler.reconcile(model)
        assert model.version == 0
        assert model.version_controls == 0
        assert model == _declared()


def test_mixed_default_value_aborts_before_writing():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = LocalStore(tmpdir)
        model = _declared()
        model.fields[1].default_value = DefaultValue(string={"en-US": "x"}, boolean={"de-DE": True})

        with pytest.raises(InvalidDeclarationError):
            Reconciler(store).reconcile(model)
        assert store.list_content_types() == []


def test_first_create_is_not_a_warning(caplog):
    with tempfile.TemporaryDirectory() as tmpdir:
        with caplog.at_level(logging.INFO, logger="cmsync.sync.reconciler"):
            plan = _reconciler(tmpdir).plan(_declared())

    assert plan.action == PlanAction.CREATE
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("planning a create" in r.getMessage() for r in caplog.records)
