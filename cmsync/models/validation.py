"""Validation rules attached to a field.

Two shapes exist for the same rule:

- ``Validation`` — the desired-side declaration. It has one optional slot per
  rule kind, mirroring the way rules are written in a declaration file;
  exactly one slot is expected to be populated.
- ``RemoteValidation`` — a tagged union of frozen dataclasses, one class per
  rule kind, mirroring the remote wire format.

``draft_validation`` and ``import_validation`` translate between the two and
``parse_validation`` decodes the wire format. All three fail with
``UnsupportedVariantError`` rather than producing an empty rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from cmsync.errors import UnsupportedVariantError


# --- Desired side ---


@dataclass
class Size:
    """An inclusive numeric range; either bound may be open."""

    min: float | None = None
    max: float | None = None


@dataclass
class Regexp:
    pattern: str


@dataclass
class Validation:
    """A declared validation rule. Only one rule slot should be set."""

    unique: bool | None = None
    size: Size | None = None
    range: Size | None = None
    asset_file_size: Size | None = None
    regexp: Regexp | None = None
    link_content_type: list[str] = field(default_factory=list)
    link_mimetype_group: list[str] = field(default_factory=list)
    in_values: list[Any] = field(default_factory=list)
    enabled_marks: list[str] = field(default_factory=list)
    enabled_node_types: list[str] = field(default_factory=list)
    message: str | None = None


# --- Remote side ---


def _min_max(min_value: float | None, max_value: float | None) -> dict:
    bounds = {}
    if min_value is not None:
        bounds["min"] = min_value
    if max_value is not None:
        bounds["max"] = max_value
    return bounds


def _with_message(payload: dict, message: str | None) -> dict:
    if message is not None:
        payload["message"] = message
    return payload


@dataclass(frozen=True)
class UniqueValidation:
    WIRE_KEY: ClassVar[str] = "unique"

    unique: bool

    def to_payload(self) -> dict:
        return {"unique": self.unique}

    @classmethod
    def from_payload(cls, data: dict) -> UniqueValidation:
        return cls(unique=bool(data["unique"]))


@dataclass(frozen=True)
class SizeValidation:
    WIRE_KEY: ClassVar[str] = "size"

    min: float | None = None
    max: float | None = None
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"size": _min_max(self.min, self.max)}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> SizeValidation:
        bounds = data.get("size") or {}
        return cls(bounds.get("min"), bounds.get("max"), data.get("message"))


@dataclass(frozen=True)
class RangeValidation:
    WIRE_KEY: ClassVar[str] = "range"

    min: float | None = None
    max: float | None = None
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"range": _min_max(self.min, self.max)}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> RangeValidation:
        bounds = data.get("range") or {}
        return cls(bounds.get("min"), bounds.get("max"), data.get("message"))


@dataclass(frozen=True)
class FileSizeValidation:
    WIRE_KEY: ClassVar[str] = "assetFileSize"

    min: float | None = None
    max: float | None = None

    def to_payload(self) -> dict:
        return {"assetFileSize": _min_max(self.min, self.max)}

    @classmethod
    def from_payload(cls, data: dict) -> FileSizeValidation:
        bounds = data.get("assetFileSize") or {}
        return cls(bounds.get("min"), bounds.get("max"))


@dataclass(frozen=True)
class RegexValidation:
    WIRE_KEY: ClassVar[str] = "regexp"

    pattern: str
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"regexp": {"pattern": self.pattern}}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> RegexValidation:
        return cls((data.get("regexp") or {}).get("pattern", ""), data.get("message"))


@dataclass(frozen=True)
class LinkContentTypeValidation:
    WIRE_KEY: ClassVar[str] = "linkContentType"

    content_types: tuple[str, ...]

    def to_payload(self) -> dict:
        return {"linkContentType": list(self.content_types)}

    @classmethod
    def from_payload(cls, data: dict) -> LinkContentTypeValidation:
        return cls(tuple(data.get("linkContentType") or ()))


@dataclass(frozen=True)
class MimeTypeValidation:
    WIRE_KEY: ClassVar[str] = "linkMimetypeGroup"

    mime_type_groups: tuple[str, ...]
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"linkMimetypeGroup": list(self.mime_type_groups)}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> MimeTypeValidation:
        return cls(tuple(data.get("linkMimetypeGroup") or ()), data.get("message"))


@dataclass(frozen=True)
class PredefinedValuesValidation:
    WIRE_KEY: ClassVar[str] = "in"

    values: tuple[Any, ...]

    def to_payload(self) -> dict:
        return {"in": list(self.values)}

    @classmethod
    def from_payload(cls, data: dict) -> PredefinedValuesValidation:
        return cls(tuple(data.get("in") or ()))


@dataclass(frozen=True)
class EnabledMarksValidation:
    WIRE_KEY: ClassVar[str] = "enabledMarks"

    marks: tuple[str, ...]
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"enabledMarks": list(self.marks)}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> EnabledMarksValidation:
        return cls(tuple(data.get("enabledMarks") or ()), data.get("message"))


@dataclass(frozen=True)
class EnabledNodeTypesValidation:
    WIRE_KEY: ClassVar[str] = "enabledNodeTypes"

    node_types: tuple[str, ...]
    message: str | None = None

    def to_payload(self) -> dict:
        return _with_message({"enabledNodeTypes": list(self.node_types)}, self.message)

    @classmethod
    def from_payload(cls, data: dict) -> EnabledNodeTypesValidation:
        return cls(tuple(data.get("enabledNodeTypes") or ()), data.get("message"))


RemoteValidation = Union[
    UniqueValidation,
    SizeValidation,
    RangeValidation,
    FileSizeValidation,
    RegexValidation,
    LinkContentTypeValidation,
    MimeTypeValidation,
    PredefinedValuesValidation,
    EnabledMarksValidation,
    EnabledNodeTypesValidation,
]

# Wire decoding order. The first key present on a payload decides its kind.
REMOTE_VARIANTS: tuple[type, ...] = (
    UniqueValidation,
    SizeValidation,
    RangeValidation,
    FileSizeValidation,
    RegexValidation,
    LinkContentTypeValidation,
    MimeTypeValidation,
    PredefinedValuesValidation,
    EnabledMarksValidation,
    EnabledNodeTypesValidation,
)


def parse_validation(data: dict) -> RemoteValidation:
    """Decode one wire validation object into its variant."""
    for variant in REMOTE_VARIANTS:
        if variant.WIRE_KEY in data:
            return variant.from_payload(data)

    raise UnsupportedVariantError(
        f"unsupported validation used, keys {sorted(data)}. Please implement"
    )


# --- Translation ---


def draft_validation(v: Validation) -> RemoteValidation:
    """Build the remote variant for a declared rule.

    Slots are tested in a fixed order and the first populated one wins.
    ``unique`` is tested for presence, since ``unique=False`` is a real rule.
    """
    if v.unique is not None:
        return UniqueValidation(unique=v.unique)

    if v.size is not None:
        return SizeValidation(v.size.min, v.size.max, v.message)

    if v.range is not None:
        return RangeValidation(v.range.min, v.range.max, v.message)

    if v.asset_file_size is not None:
        return FileSizeValidation(v.asset_file_size.min, v.asset_file_size.max)

    if v.regexp is not None:
        return RegexValidation(v.regexp.pattern, v.message)

    if v.link_content_type:
        return LinkContentTypeValidation(tuple(v.link_content_type))

    if v.link_mimetype_group:
        return MimeTypeValidation(tuple(v.link_mimetype_group), v.message)

    if v.in_values:
        return PredefinedValuesValidation(tuple(v.in_values))

    if v.enabled_marks:
        return EnabledMarksValidation(tuple(v.enabled_marks), v.message)

    if v.enabled_node_types:
        return EnabledNodeTypesValidation(tuple(v.enabled_node_types), v.message)

    raise UnsupportedVariantError(
        f"validation {type(v).__name__} has no rule populated"
    )


def import_validation(remote: RemoteValidation) -> Validation:
    """Build the declared rule for a remote variant."""
    if isinstance(remote, UniqueValidation):
        return Validation(unique=remote.unique)

    if isinstance(remote, SizeValidation):
        return Validation(size=Size(remote.min, remote.max), message=remote.message)

    if isinstance(remote, RangeValidation):
        return Validation(range=Size(remote.min, remote.max), message=remote.message)

    if isinstance(remote, FileSizeValidation):
        return Validation(asset_file_size=Size(remote.min, remote.max))

    if isinstance(remote, RegexValidation):
        return Validation(regexp=Regexp(remote.pattern), message=remote.message)

    if isinstance(remote, LinkContentTypeValidation):
        return Validation(link_content_type=list(remote.content_types))

    if isinstance(remote, MimeTypeValidation):
        return Validation(
            link_mimetype_group=list(remote.mime_type_groups), message=remote.message
        )

    if isinstance(remote, PredefinedValuesValidation):
        return Validation(in_values=list(remote.values))

    if isinstance(remote, EnabledMarksValidation):
        return Validation(enabled_marks=list(remote.marks), message=remote.message)

    if isinstance(remote, EnabledNodeTypesValidation):
        return Validation(enabled_node_types=list(remote.node_types), message=remote.message)

    raise UnsupportedVariantError(
        f"unsupported validation used, {type(remote).__name__}. Please implement"
    )


def draft_validations(validations: list[Validation]) -> list[RemoteValidation]:
    return [draft_validation(v) for v in validations]


def import_validations(validations: list[RemoteValidation]) -> list[Validation]:
    return [import_validation(v) for v in validations]
