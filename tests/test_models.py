"""Tests for the shared Pydantic models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from jsonreq.exceptions import IOFailure, NetworkFailure, ParseFailure
from jsonreq.models import (
    Absent,
    Body,
    ClientSettings,
    Failure,
    FailureKind,
    RawText,
    RequestConfig,
    Structured,
    Success,
)


class TestBodyUnion:
    def test_discriminated_by_kind(self) -> None:
        adapter = TypeAdapter(Body)
        assert adapter.validate_python({"kind": "absent"}) == Absent()
        assert adapter.validate_python({"kind": "raw_text", "text": "a=1"}) == RawText(text="a=1")
        assert adapter.validate_python(
            {"kind": "structured", "value": [1]}
        ) == Structured(value=[1])

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(Body).validate_python({"kind": "binary"})

    def test_structured_requires_json_value(self) -> None:
        with pytest.raises(ValidationError):
            Structured(value={1, 2})

    def test_structured_rejects_nan(self) -> None:
        with pytest.raises(ValidationError):
            Structured(value=float("inf"))

    def test_bodies_are_frozen(self) -> None:
        body = RawText(text="a")
        with pytest.raises(ValidationError):
            body.text = "b"  # type: ignore[misc]


class TestRequestConfig:
    def test_defaults(self) -> None:
        config = RequestConfig(url="https://api.example.com/")
        assert config.headers is None
        assert config.query_params is None
        assert config.body == Absent()
        assert config.persist_target is None

    def test_frozen(self) -> None:
        config = RequestConfig(url="https://api.example.com/")
        with pytest.raises(ValidationError):
            config.url = "https://other.example.com/"  # type: ignore[misc]

    def test_body_from_dict(self) -> None:
        config = RequestConfig.model_validate(
            {"url": "https://api.example.com/", "body": {"kind": "raw_text", "text": "a=1"}}
        )
        assert config.body == RawText(text="a=1")

    def test_persist_target_is_path(self) -> None:
        config = RequestConfig(url="https://api.example.com/", persist_target="out/x.json")
        assert config.persist_target == Path("out/x.json")

    @pytest.mark.parametrize("url", ["", "relative", "/path/only", "https://"])
    def test_url_must_be_absolute(self, url: str) -> None:
        with pytest.raises(ValidationError):
            RequestConfig(url=url)

    def test_header_values_must_be_strings(self) -> None:
        with pytest.raises(ValidationError):
            RequestConfig(url="https://api.example.com/", headers={"X-N": 1})

    def test_header_values_must_be_ascii(self) -> None:
        with pytest.raises(ValidationError, match="ASCII"):
            RequestConfig(url="https://api.example.com/", headers={"X-Name": "caf\u00e9"})


class TestResults:
    def test_success(self) -> None:
        result = Success(value={"a": 1})
        assert result.ok is True
        assert result.unwrap() == {"a": 1}
        assert result.value_or_none() == {"a": 1}

    def test_success_keeps_identity_of_value(self) -> None:
        value = {"a": [1]}
        assert Success(value=value).value is value

    @pytest.mark.parametrize(
        ("error", "kind", "exit_code"),
        [
            (NetworkFailure("down"), FailureKind.NETWORK, 6),
            (ParseFailure("html"), FailureKind.PARSE, 7),
            (IOFailure("denied"), FailureKind.IO, 8),
        ],
    )
    def test_failure_from_error(self, error, kind: FailureKind, exit_code: int) -> None:
        failure = Failure.from_error(error)
        assert failure.ok is False
        assert failure.kind == kind
        assert failure.message == str(error)
        assert failure.exit_code == exit_code
        assert failure.value_or_none() is None

    def test_failure_unwrap_raises_typed_error(self) -> None:
        failure = Failure(kind=FailureKind.PARSE, message="bad")
        with pytest.raises(ParseFailure, match="bad"):
            failure.unwrap()

    def test_failure_from_other_error_rejected(self) -> None:
        from jsonreq.exceptions import ConfigError

        with pytest.raises(TypeError):
            Failure.from_error(ConfigError("x"))

    def test_failure_str(self) -> None:
        assert str(Failure(kind=FailureKind.IO, message="denied")) == "io failure: denied"


class TestClientSettings:
    def test_defaults(self) -> None:
        settings = ClientSettings()
        assert settings.timeout == 30.0
        assert settings.verify_ssl is True
        assert settings.follow_redirects is False

    def test_timeout_may_be_disabled(self) -> None:
        assert ClientSettings(timeout=None).timeout is None
