"""Tests for error translation."""

from cmsync.diagnostics import Diagnostic, Severity, errors, has_error, translate_error, warnings
from cmsync.errors import ConflictError, ErrorDetail, RemoteValidationError, TransportError


def test_translate_none():
    assert translate_error(None) == []


def test_translate_regular_error():
    assert translate_error(ValueError("boom")) == [Diagnostic(Severity.ERROR, "boom")]


def test_translate_conflict():
    diagnostics = translate_error(ConflictError("article", submitted=2, current=3))
    assert len(diagnostics) == 1
    assert diagnostics[0].severity == Severity.ERROR
    assert "version mismatch" in diagnostics[0].summary


def test_translate_transport_error():
    assert translate_error(TransportError("connection reset")) == [
        Diagnostic(Severity.ERROR, "connection reset")
    ]


def test_translate_remote_error_without_details():
    assert translate_error(RemoteValidationError("Forbidden")) == [
        Diagnostic(Severity.ERROR, "Forbidden")
    ]


def test_translate_remote_error_with_details():
    err = RemoteValidationError(
        "Validation error",
        [
            ErrorDetail("Size must be at most 50", ["fields", "0", "name"]),
            ErrorDetail("Required", ["displayField"]),
        ],
    )
    assert translate_error(err) == [
        Diagnostic(Severity.WARNING, "Size must be at most 50 (fields.0.name)"),
        Diagnostic(Severity.WARNING, "Required (displayField)"),
        Diagnostic(Severity.ERROR, "Validation error"),
    ]


def test_translate_detail_without_path():
    err = RemoteValidationError("Validation error", [ErrorDetail("bad")])
    assert translate_error(err)[0].summary == "bad ()"


def test_remote_error_from_payload():
    err = RemoteValidationError.from_payload(
        {
            "message": "Validation error",
            "details": {"errors": [{"path": ["fields", 2, "id"], "details": "duplicate"}]},
        }
    )
    assert err.message == "Validation error"
    assert err.errors == [ErrorDetail("duplicate", ["fields", 2, "id"])]
    assert translate_error(err)[0].summary == "duplicate (fields.2.id)"


def test_remote_error_payload_round_trip():
    payload = {
        "message": "Validation error",
        "details": {"errors": [{"details": "duplicate", "path": ["fields", 2, "id"]}]},
    }
    assert RemoteValidationError.from_payload(payload).to_payload() == payload


def test_helpers():
    diagnostics = translate_error(RemoteValidationError("failed", [ErrorDetail("x", ["a"])]))
    assert has_error(diagnostics)
    assert [d.summary for d in errors(diagnostics)] == ["failed"]
    assert [d.summary for d in warnings(diagnostics)] == ["x (a)"]
    assert not has_error(warnings(diagnostics))
