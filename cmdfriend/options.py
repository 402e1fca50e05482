r"""
Cmdfriend option descriptors.

Overview
- Capability: the tagged capabilities a descriptor may carry
  (ALIAS, OPTIONAL, NO_CHAR_KEY, NO_LONG_KEY, HIDDEN). A descriptor holds a
  frozenset of them and code checks membership (``OPTIONAL in option.flags``).
- Descriptor: passive, immutable record describing one option of a table.

Descriptor fields (sanitized on construction)
- long_name: non-empty string without whitespace and without a leading '-'.
  Addressed on the command line as ``--long_name``.
- key: a one-character string (addressed as ``-k``) or an integer code for
  options without a character form (use together with NO_CHAR_KEY).
- flags: a Capability or an iterable of them.
- arity: 0 (flag), N > 0 (exactly N trailing arguments) or -1 (variadic).
  Aliases may omit it (inherited); other descriptors default to 0.
- description: help text; aliases may omit it (inherited).

Table-level rules (unique keys, the reserved 0 key, alphabetic keys, alias
placement, arity range) are checked by the registry, not here: a single
descriptor cannot know about its neighbours.

Quick example:
    >>> from cmdfriend.options import Descriptor, ALIAS, OPTIONAL
    >>> table = [
    ...     Descriptor("where", "w", (), 1, "Where to create the project"),
    ...     Descriptor("output", "o", ALIAS),
    ...     Descriptor("verbose", "v", OPTIONAL, 0, "Verbose mode"),
    ... ]
"""
import re
from collections.abc import Iterable
from enum import Enum

from .utils import *


class Capability(Enum):
    """
    capabilities a descriptor may carry.
    """
    ALIAS = "alias"  # alias of the nearest preceding non-alias descriptor
    OPTIONAL = "optional"  # not required for the run to be valid
    NO_CHAR_KEY = "no-char-key"  # not addressable with -k; key must be non-alphabetic
    NO_LONG_KEY = "no-long-key"  # not addressable with --long_name
    HIDDEN = "hidden"  # not listed by --help


ALIAS = Capability.ALIAS
OPTIONAL = Capability.OPTIONAL
NO_CHAR_KEY = Capability.NO_CHAR_KEY
NO_LONG_KEY = Capability.NO_LONG_KEY
HIDDEN = Capability.HIDDEN

VARIADIC = -1


def isletter(key, /):
    """
    True when key is a single ASCII letter (the only valid character keys).
    """
    return isinstance(key, str) and len(key) == 1 and key.isascii() and key.isalpha()


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize descriptor metadata in place.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a field has the right type but a malformed value.
    """
    if not isinstance(long_name := metadata["long_name"], str):
        raise TypeError(f"{cls.__typename__} 'long_name' must be a string")
    elif not (long_name := long_name.strip()):
        raise ValueError(f"{cls.__typename__} 'long_name' cannot be empty")
    elif not re.fullmatch(r"[^\s-]\S*", long_name):
        raise ValueError(f"{cls.__typename__} 'long_name' cannot start with '-' or contain whitespace")
    metadata["long_name"] = long_name

    # bool is an int subclass but never a meaningful key
    if isinstance(key := metadata["key"], bool) or not isinstance(key, str | int):
        raise TypeError(f"{cls.__typename__} 'key' must be a one-character string or an integer code")
    elif isinstance(key, str) and len(key) != 1:
        raise ValueError(f"{cls.__typename__} 'key' must be exactly one character")

    flags = metadata["flags"]
    if isinstance(flags, Capability):
        flags = (flags,)
    if not isinstance(flags, Iterable):
        raise TypeError(f"{cls.__typename__} 'flags' must be a capability or an iterable of capabilities")
    flags = frozenset(flags)
    if not all(isinstance(flag, Capability) for flag in flags):
        raise TypeError(f"{cls.__typename__} 'flags' must only contain capabilities")
    metadata["flags"] = flags

    if isinstance(arity := metadata["arity"], bool) or not isinstance(arity, int | Unset):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    if ALIAS not in flags:
        metadata["arity"] = coalesce(arity, 0)

    if not isinstance(description := metadata["description"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    if ALIAS not in flags:
        metadata["description"] = coalesce(description)
    else:
        metadata["description"] = description


class Descriptor(metaclass=RecordType):
    """
    Passive record describing one option.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - flags is always a frozenset of Capability members.
    - For aliases, arity and description stay Unset until the registry resolves
      them from the nearest preceding non-alias descriptor.
    """

    __introspectable__ = (
        "long_name",
        "key",
        "flags",
        "arity",
        "description",
    )

    def __init__(self, long_name, key, flags=(), arity=Unset, description=Unset):
        metadata = {
            "long_name": long_name,
            "key": key,
            "flags": flags,
            "arity": arity,
            "description": description,
        }
        _sanitize_metadata(type(self), metadata)

        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)

    @property
    def short(self):
        """
        the "-k" form, or None when the option has no character form.
        """
        if not isletter(self.key):
            return None
        return "-" + self.key

    @property
    def long(self):
        """
        the "--long_name" form, or None when long addressing is disabled.
        """
        if NO_LONG_KEY in self.flags:
            return None
        return "--" + self.long_name

    @property
    def label(self):
        """
        human-friendly name used in messages: "-k / --long_name" or "--long_name".
        """
        return " / ".join(filter(None, (self.short, "--" + self.long_name)))


__all__ = (
    "Capability",
    "ALIAS",
    "OPTIONAL",
    "NO_CHAR_KEY",
    "NO_LONG_KEY",
    "HIDDEN",
    "VARIADIC",
    "Descriptor",
    "isletter",
)
