"""Source configuration.

SourceConfig is a frozen dataclass: immutable after creation, shared
read-only by every source built from it.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Settings for the query-string and form-body sources.

    All fields have sensible defaults. Override what you need::

        config = SourceConfig(strip=True, max_content_length=64 * 1024)
    """

    # Decoding
    query_encoding: str = "latin-1"
    form_encoding: str = "utf-8"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Strip surrounding whitespace; a value that strips to "" is absent
    strip: bool = False
