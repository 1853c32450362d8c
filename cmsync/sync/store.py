"""Remote stores — the read/write contract of the authoritative system.

``RemoteStore`` is the contract the reconciler drives. ``LocalStore`` is a
file-system-backed implementation for development and tests: it keeps each
content type and editor interface as a JSON document and enforces the same
rules as the remote system (versions, identity, payload validation).
"""

from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from cmsync.errors import ConflictError, ErrorDetail, NotFoundError, RemoteValidationError
from cmsync.models.content_model import FieldType
from cmsync.models.remote import EditorInterface, RemoteContentModel

logger = logging.getLogger(__name__)


class RemoteStore(ABC):
    """Read/write contract for content types and their editor interfaces.

    Every write takes the version last observed from a read and raises
    ``ConflictError`` when the remote has moved on.
    """

    @abstractmethod
    def get_content_type(self, model_id: str) -> RemoteContentModel:
        """Return the content type, or raise ``NotFoundError``."""

    @abstractmethod
    def create_content_type(self, model: RemoteContentModel) -> RemoteContentModel:
        """Create a content type and return it with its identity and version."""

    @abstractmethod
    def update_content_type(
        self, model_id: str, version: int, model: RemoteContentModel
    ) -> RemoteContentModel:
        """Replace a content type and return it with its new version."""

    @abstractmethod
    def get_editor_interface(self, model_id: str) -> EditorInterface | None:
        """Return the editor interface, or None if it was never written."""

    @abstractmethod
    def update_editor_interface(
        self, model_id: str, version: int, editor_interface: EditorInterface
    ) -> EditorInterface:
        """Replace the editor interface; ``version`` 0 writes it for the first time."""


class LocalStore(RemoteStore):
    """File-based store, one directory per space and environment."""

    CONTENT_TYPES_DIR = "content_types"
    EDITOR_INTERFACES_DIR = "editor_interfaces"

    def __init__(self, store_dir: str | Path, space_id: str = "default", environment: str = "master"):
        self.store_dir = Path(store_dir) / space_id / environment
        self.content_types_dir = self.store_dir / self.CONTENT_TYPES_DIR
        self.editor_interfaces_dir = self.store_dir / self.EDITOR_INTERFACES_DIR
        self.content_types_dir.mkdir(parents=True, exist_ok=True)
        self.editor_interfaces_dir.mkdir(parents=True, exist_ok=True)

    # --- Content types ---

    def get_content_type(self, model_id: str) -> RemoteContentModel:
        path = self._content_type_path(model_id)
        if not path.exists():
            raise NotFoundError(model_id)
        logger.debug("Reading content type %s from %s", model_id, path)
        return RemoteContentModel.from_payload(_read_json(path))

    def list_content_types(self) -> list[RemoteContentModel]:
        return [
            RemoteContentModel.from_payload(_read_json(p))
            for p in sorted(self.content_types_dir.glob("*.json"))
        ]

    def create_content_type(self, model: RemoteContentModel) -> RemoteContentModel:
        model_id = model.id or uuid.uuid4().hex
        path = self._content_type_path(model_id)

        if path.exists():
            current = RemoteContentModel.from_payload(_read_json(path))
            raise ConflictError(model_id, submitted=0, current=current.version)

        _validate_content_type(model)

        stored = RemoteContentModel.from_payload(model.to_payload())
        stored.id = model_id
        stored.version = 1
        _write_json(path, stored.to_payload())
        logger.info("Created content type %s (version %d)", model_id, stored.version)
        return stored

    def update_content_type(
        self, model_id: str, version: int, model: RemoteContentModel
    ) -> RemoteContentModel:
        current = self.get_content_type(model_id)

        if version != current.version:
            raise ConflictError(model_id, submitted=version, current=current.version)

        _validate_content_type(model)

        stored = RemoteContentModel.from_payload(model.to_payload())
        stored.id = model_id
        stored.version = current.version + 1
        _write_json(self._content_type_path(model_id), stored.to_payload())
        logger.info("Updated content type %s (version %d)", model_id, stored.version)
        return stored

    # --- Editor interfaces ---

    def get_editor_interface(self, model_id: str) -> EditorInterface | None:
        self.get_content_type(model_id)
        path = self._editor_interface_path(model_id)
        if not path.exists():
            return None
        return EditorInterface.from_payload(_read_json(path))

    def update_editor_interface(
        self, model_id: str, version: int, editor_interface: EditorInterface
    ) -> EditorInterface:
        content_type = self.get_content_type(model_id)
        current = self.get_editor_interface(model_id)
        current_version = current.version if current is not None else 0

        if version != current_version:
            raise ConflictError(model_id, submitted=version, current=current_version)

        _validate_editor_interface(editor_interface, content_type)

        stored = EditorInterface.from_payload(editor_interface.to_payload())
        stored.version = current_version + 1
        _write_json(self._editor_interface_path(model_id), stored.to_payload())
        logger.info("Updated editor interface %s (version %d)", model_id, stored.version)
        return stored

    def _content_type_path(self, model_id: str) -> Path:
        return self.content_types_dir / f"{model_id}.json"

    def _editor_interface_path(self, model_id: str) -> Path:
        return self.editor_interfaces_dir / f"{model_id}.json"


def _read_json(path: Path) -> dict:
    with open(path) as f:
        return json.load(f)


def _write_json(path: Path, data: dict) -> None:
    with open(path, "w") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def _validate_content_type(model: RemoteContentModel) -> None:
    """Reject payloads the remote system would reject."""
    errors: list[ErrorDetail] = []
    seen: set[str] = set()

    for i, f in enumerate(model.fields):
        if f.id in seen:
            errors.append(ErrorDetail(f"duplicate field id '{f.id}'", ["fields", i, "id"]))
        seen.add(f.id)

        if f.type == FieldType.ARRAY and f.items is None:
            errors.append(ErrorDetail("Array fields must declare items", ["fields", i, "items"]))

    if model.display_field and model.display_field not in seen:
        errors.append(
            ErrorDetail(f"display field '{model.display_field}' is not a field", ["displayField"])
        )

    if errors:
        raise RemoteValidationError("Validation error", errors)


def _validate_editor_interface(editor_interface: EditorInterface, content_type: RemoteContentModel) -> None:
    field_ids = set(content_type.field_ids())
    errors = [
        ErrorDetail(f"unknown field '{c.field_id}'", ["controls", i, "fieldId"])
        for i, c in enumerate(editor_interface.controls)
        if c.field_id not in field_ids
    ]
    if errors:
        raise RemoteValidationError("Validation error", errors)
