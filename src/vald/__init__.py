"""Vald — declarative validation for flat string inputs.

Validates named string values (form fields, query parameters,
environment variables) against per-field rules and produces either a
dict of normalized values or the error for the first failing field.

Basic usage::

    from vald import Cond, Opt, OptDef, Pack, Req, boolean, integer, one_of, regex

    validate_order = Pack(
        Req("sku", regex(r"^[A-Z]{3}-\\d{4}$")),
        Opt("size", one_of("S", "M", "L")),
        OptDef("gift", boolean, "false"),
        Cond("coupon", regex(r"^\\w+$"), no=Req("price", integer)),
    )

    data = validate_order.map({"sku": "ABC-0042", "price": "10"})

Validators are immutable and can be shared across threads; build them
once and reuse them.
"""

from vald.checkers import (
    boolean,
    chain,
    email,
    integer,
    max_length,
    min_length,
    number,
    one_of,
    regex,
    url,
)
from vald.config import SourceConfig
from vald.errors import (
    CheckError,
    ConfigurationError,
    FieldError,
    InvalidValueError,
    MissingValueError,
    ValdError,
)
from vald.result import ValidationResult, validate
from vald.sources import from_env, from_form_body, from_mapping, from_query_string
from vald.validators import Cond, Opt, OptDef, Pack, Req, Validator

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "CheckError",
    "Cond",
    "ConfigurationError",
    "FieldError",
    "InvalidValueError",
    "MissingValueError",
    "Opt",
    "OptDef",
    "Pack",
    "Req",
    "SourceConfig",
    "ValdError",
    "ValidationResult",
    "Validator",
    "boolean",
    "chain",
    "email",
    "from_env",
    "from_form_body",
    "from_mapping",
    "from_query_string",
    "integer",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "regex",
    "url",
    "validate",
]
