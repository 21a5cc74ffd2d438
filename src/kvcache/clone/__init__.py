"""Value isolation: cycle-safe, depth-limited deep copies of value graphs."""

from .isolator import UNSET, CloneOptions, Derived, clone, clone_prototype
from .kinds import ValueKind, classify, is_deferred, is_instant, is_pattern, is_sequence, pattern_flags

__all__ = [
    "clone",
    "clone_prototype",
    "CloneOptions",
    "Derived",
    "UNSET",
    "ValueKind",
    "classify",
    "is_deferred",
    "is_instant",
    "is_pattern",
    "is_sequence",
    "pattern_flags",
]
