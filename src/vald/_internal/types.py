"""Shared type aliases used across vald modules."""

from collections.abc import Callable
from typing import TypeAlias

# Value source: returns the current value for a name, or "" when absent
Getter: TypeAlias = Callable[[str], str]

# Output sink: receives each accepted (name, value) pair; fails by raising
Consumer: TypeAlias = Callable[[str, str], None]

# Normalize-or-reject function for a single raw value
Checker: TypeAlias = Callable[[str], str]
