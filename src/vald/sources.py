"""Value sources — adapters that turn common inputs into getters.

A getter takes a field name and returns its value, or ``""`` when the
field is absent. Any callable with that shape works as a source;
the functions here cover the usual cases::

    from vald.sources import from_env, from_form_body, from_mapping, from_query_string

    validate.map(from_mapping({"page": "2"}))
    validate.map(from_env(prefix="APP_"))
    validate.map(from_query_string(b"q=hello&page=2"))
    validate.map(from_form_body(body, headers["content-type"]))

Query strings and URL-encoded forms use stdlib ``urllib.parse``.
Multipart forms need ``python-multipart`` (``pip install vald[forms]``).
When a key repeats, the first value wins.
"""

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import parse_qs

from vald._internal.types import Getter
from vald.config import SourceConfig
from vald.errors import ConfigurationError

logger = logging.getLogger("vald.sources")

_DEFAULT_CONFIG = SourceConfig()


def from_mapping(mapping: Mapping[str, str | None]) -> Getter:
    """Construct a getter from a mapping. Lookups are exact; ``None`` is absent."""

    def get(name: str) -> str:
        return mapping.get(name) or ""

    return get


def from_env(prefix: str = "", environ: Mapping[str, str] | None = None) -> Getter:
    """Construct a getter over environment variables.

    Every field name is looked up as ``prefix + name``. *environ*
    defaults to ``os.environ``, read at call time.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> str:
        return env.get(prefix + name) or ""

    return get


def as_getter(source: Getter | Mapping[str, str]) -> Getter:
    """Return *source* as a getter, wrapping mappings with ``from_mapping``."""
    if isinstance(source, Mapping):
        return from_mapping(source)
    if callable(source):
        return source
    msg = f"Unsupported source type: {type(source).__name__}"
    raise TypeError(msg)


def from_query_string(query: bytes | str, config: SourceConfig | None = None) -> Getter:
    """Construct a getter from a raw URL query string."""
    config = config or _DEFAULT_CONFIG
    if isinstance(query, bytes):
        query = query.decode(config.query_encoding)
    return _first_values(parse_qs(query, keep_blank_values=True), config)


def from_form_body(
    body: bytes,
    content_type: str,
    config: SourceConfig | None = None,
) -> Getter:
    """Construct a getter from a form request body.

    Supports:
    - ``application/x-www-form-urlencoded`` (stdlib, no extra dependency)
    - ``multipart/form-data`` (requires ``python-multipart``)

    Uploaded files are not field values and are skipped.

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If the content type is not a form encoding, the
            body exceeds ``max_content_length``, or a multipart body
            has no boundary.
    """
    config = config or _DEFAULT_CONFIG

    if len(body) > config.max_content_length:
        msg = f"Form body too large: {len(body)} bytes (limit {config.max_content_length})"
        raise ValueError(msg)

    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        parsed = parse_qs(body.decode(config.form_encoding), keep_blank_values=True)
        return _first_values(parsed, config)

    if ct_lower == "multipart/form-data":
        return _first_values(_parse_multipart(body, content_type, config), config)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _first_values(data: dict[str, list[str]], config: SourceConfig) -> Getter:
    values: dict[str, str] = {}
    for name, items in data.items():
        value = items[0] if items else ""
        values[name] = value.strip() if config.strip else value
    logger.debug("parsed %d source fields", len(values))
    return from_mapping(values)


def _parse_multipart(
    body: bytes,
    content_type: str,
    config: SourceConfig,
) -> dict[str, list[str]]:
    """Collect the plain (non-file) fields of a multipart body."""
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install vald[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}

    # Current part
    header_field = bytearray()
    header_value = bytearray()
    field_name: str | None = None
    is_file = False
    content = bytearray()

    def on_part_begin() -> None:
        nonlocal field_name, is_file
        field_name = None
        is_file = False
        content.clear()

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        nonlocal field_name, is_file
        if bytes(header_field).lower() == b"content-disposition":
            _, params = parse_options_header(bytes(header_value))
            name = params.get(b"name")
            if name is not None:
                field_name = name.decode(config.form_encoding)
            is_file = b"filename" in params
        header_field.clear()
        header_value.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        content.extend(chunk[start:end])

    def on_part_end() -> None:
        if field_name is None:
            return
        if is_file:
            logger.debug("skipping file upload in field %r", field_name)
            return
        value = content.decode(config.form_encoding, errors="replace")
        data.setdefault(field_name, []).append(value)

    callbacks: dict[str, Callable[..., Any]] = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return data
