"""Hook event-name derivation."""

from __future__ import annotations

BEGIN_PREFIX = "onBegin"
AFTER_PREFIX = "onAfter"
ERROR_EVENT = "onError"


def capitalize_first(name: str) -> str:
    """Upper-case the first character of *name*, leaving the rest untouched.

    Unlike :meth:`str.capitalize`, the tail is not lower-cased:

    >>> capitalize_first("getDocumentData")
    'GetDocumentData'
    >>> capitalize_first("add_signer")
    'Add_signer'
    """
    return name[:1].upper() + name[1:]


def derive_name(prefix: str, name: str) -> str:
    """Return the event name for operation *name* under *prefix*."""
    return prefix + capitalize_first(name)


def begin_event(name: str) -> str:
    return derive_name(BEGIN_PREFIX, name)


def after_event(name: str) -> str:
    return derive_name(AFTER_PREFIX, name)
