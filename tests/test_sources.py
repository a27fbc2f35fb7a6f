"""Tests for vald.sources — getters over mappings, env, query strings, and forms."""

import sys

import pytest

from vald.checkers import boolean, integer
from vald.config import SourceConfig
from vald.errors import ConfigurationError
from vald.sources import as_getter, from_env, from_form_body, from_mapping, from_query_string
from vald.validators import OptDef, Pack, Req

# ---------------------------------------------------------------------------
# Mappings and environment
# ---------------------------------------------------------------------------


class TestFromMapping:
    def test_present(self) -> None:
        assert from_mapping({"a": "1"})("a") == "1"

    def test_missing(self) -> None:
        assert from_mapping({"a": "1"})("b") == ""

    def test_none_is_absent(self) -> None:
        assert from_mapping({"a": None})("a") == ""

    def test_exact_lookup(self) -> None:
        get = from_mapping({"Name": "x", "name ": "y"})
        assert get("name") == ""


class TestFromEnv:
    def test_reads_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VALD_TEST_PORT", "8080")
        assert from_env()("VALD_TEST_PORT") == "8080"

    def test_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "8080")
        assert from_env(prefix="APP_")("PORT") == "8080"

    def test_read_at_call_time(self, monkeypatch: pytest.MonkeyPatch) -> None:
        get = from_env(prefix="VALD_TEST_")
        monkeypatch.delenv("VALD_TEST_LATE", raising=False)
        assert get("LATE") == ""
        monkeypatch.setenv("VALD_TEST_LATE", "1")
        assert get("LATE") == "1"

    def test_explicit_environ(self) -> None:
        get = from_env(environ={"DEBUG": "1"})
        assert get("DEBUG") == "1"
        assert get("PATH") == ""

    def test_validates_settings(self) -> None:
        settings = Pack(Req("PORT", integer), OptDef("DEBUG", boolean, "false"))
        env = {"APP_PORT": "0080"}
        assert settings.map(from_env("APP_", env)) == {"PORT": "80", "DEBUG": "false"}


class TestAsGetter:
    def test_callable_unchanged(self) -> None:
        def get(name: str) -> str:
            return name

        assert as_getter(get) is get

    def test_mapping_wrapped(self) -> None:
        assert as_getter({"a": "1"})("a") == "1"

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError):
            as_getter(42)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Query strings
# ---------------------------------------------------------------------------


class TestFromQueryString:
    def test_basic(self) -> None:
        get = from_query_string(b"q=hello&page=2")
        assert get("q") == "hello"
        assert get("page") == "2"
        assert get("missing") == ""

    def test_str_input(self) -> None:
        assert from_query_string("q=hello")("q") == "hello"

    def test_first_value_wins(self) -> None:
        assert from_query_string(b"tag=python&tag=rust")("tag") == "python"

    def test_blank_is_absent(self) -> None:
        assert from_query_string(b"q=")("q") == ""

    def test_percent_decoding(self) -> None:
        assert from_query_string(b"q=hello%20world&x=a+b")("q") == "hello world"
        assert from_query_string(b"x=a+b")("x") == "a b"

    def test_strip(self) -> None:
        get = from_query_string(b"q=+hi+&blank=+++", SourceConfig(strip=True))
        assert get("q") == "hi"
        assert get("blank") == ""


# ---------------------------------------------------------------------------
# Form bodies
# ---------------------------------------------------------------------------


class TestFromFormBodyUrlEncoded:
    def test_basic(self) -> None:
        get = from_form_body(b"name=alice&age=30", "application/x-www-form-urlencoded")
        assert get("name") == "alice"
        assert get("age") == "30"

    def test_charset_parameter(self) -> None:
        get = from_form_body(
            "name=J%C3%BCrgen".encode(),
            "application/x-www-form-urlencoded; charset=utf-8",
        )
        assert get("name") == "Jürgen"

    def test_empty_body(self) -> None:
        assert from_form_body(b"", "application/x-www-form-urlencoded")("name") == ""

    def test_unsupported_content_type(self) -> None:
        with pytest.raises(ValueError, match="Unsupported form content type"):
            from_form_body(b"{}", "application/json")

    def test_too_large(self) -> None:
        config = SourceConfig(max_content_length=4)
        with pytest.raises(ValueError, match="too large"):
            from_form_body(b"name=alice", "application/x-www-form-urlencoded", config)


def _multipart_body() -> bytes:
    return (
        b"--BOUNDARY\r\n"
        b'Content-Disposition: form-data; name="title"\r\n'
        b"\r\n"
        b"Hello\r\n"
        b"--BOUNDARY\r\n"
        b'Content-Disposition: form-data; name="title"\r\n'
        b"\r\n"
        b"Second\r\n"
        b"--BOUNDARY\r\n"
        b'Content-Disposition: form-data; name="avatar"; filename="a.png"\r\n'
        b"Content-Type: image/png\r\n"
        b"\r\n"
        b"PNGDATA\r\n"
        b"--BOUNDARY\r\n"
        b'Content-Disposition: form-data; name="publish"\r\n'
        b"\r\n"
        b"1\r\n"
        b"--BOUNDARY--\r\n"
    )


class TestFromFormBodyMultipart:
    @pytest.fixture(autouse=True)
    def _requires_multipart(self) -> None:
        pytest.importorskip("python_multipart")

    def test_fields(self) -> None:
        get = from_form_body(_multipart_body(), "multipart/form-data; boundary=BOUNDARY")
        assert get("title") == "Hello"
        assert get("publish") == "1"

    def test_files_skipped(self) -> None:
        get = from_form_body(_multipart_body(), "multipart/form-data; boundary=BOUNDARY")
        assert get("avatar") == ""

    def test_validates(self) -> None:
        get = from_form_body(_multipart_body(), "multipart/form-data; boundary=BOUNDARY")
        form = Pack(Req("title", lambda v: v), Req("publish", boolean))
        assert form.map(get) == {"title": "Hello", "publish": "true"}

    def test_missing_boundary(self) -> None:
        with pytest.raises(ValueError, match="boundary"):
            from_form_body(_multipart_body(), "multipart/form-data")


class TestMultipartMissingDependency:
    def test_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "python_multipart", None)
        monkeypatch.setitem(sys.modules, "python_multipart.multipart", None)
        with pytest.raises(ConfigurationError, match="python-multipart"):
            from_form_body(_multipart_body(), "multipart/form-data; boundary=BOUNDARY")
