"""
Cmdfriend option registry: validate, merge and index descriptor tables.

What this module provides
- Registry: the merged, resolved, read-only option table of one parse call.
  • descriptors: built-ins first, then the caller's, in declaration order.
  • by_key / by_name: lookup indices.
  • groups: ordered required-groups (tuples of keys; any member satisfies it).
  • builtins: keys that route to the default renderers.
- build(user, builtins): construct a Registry from two descriptor sequences.
- register(user, defaults=True): build with (or without) the default option set.

Validation (per entry, in table order)
- duplicate key                           → DuplicateKeyError
- duplicate long name                     → DuplicateNameError
- key equal to the reserved 0             → ReservedKeyError
- NO_CHAR_KEY with an alphabetic key, or
  a letter-less key without NO_CHAR_KEY   → InvalidKeyError
- alias without a preceding non-alias     → MalformedAliasError
- arity not an integer >= -1              → InvalidArityError

Required groups
- A non-alias, non-optional entry opens a group; every alias immediately
  following it joins that group. Any other entry closes the run. Groups are
  derived from the flags as declared, before aliases inherit their ancestor's.

Registry errors are authoring defects of the option table: they are always
raised, whatever the parse mode says.
"""
import copy
from collections.abc import Iterable

from .defaults import BUILTINS
from .faults import *
from .options import *
from .utils import *


def _fault(cls, message, code, hint, **options):
    return cls(message, title=code.name.lower().replace("_", " "), code=code, hint=hint, docs=getdoc(code), **options)


def _display(key):
    return repr(key) if isinstance(key, str) else str(int(key))


class Registry:
    """
    Merged option table with its lookup indices and required-groups.

    Instances are produced by build()/register(); the constructor is internal.
    The registry is a read-only, ordered and sized collection of descriptors:
    iteration yields them in table order and ``key in registry`` tests keys.
    """

    __introspectable__ = (
        "descriptors",
        "by_key",
        "by_name",
        "groups",
        "builtins",
    )

    descriptors = mirror("descriptors")
    by_key = mirror("by_key")
    by_name = mirror("by_name")
    groups = mirror("groups")
    builtins = mirror("builtins")

    def __init__(self, descriptors, by_key, by_name, groups, builtins, /):
        self._descriptors = tuple(descriptors)
        self._by_key = dict(by_key)
        self._by_name = dict(by_name)
        self._groups = tuple(map(tuple, groups))
        self._builtins = frozenset(builtins)

    def __iter__(self):
        return iter(self._descriptors)

    def __len__(self):
        return len(self._descriptors)

    def __contains__(self, key):
        return key in self._by_key

    def __repr__(self):
        return "registry(%s)" % ", ".join(option.long_name for option in self._descriptors)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def lookup_name(self, name, /):
        """
        descriptor addressed by ``--name``, or None.
        """
        return self._by_name.get(name)

    def lookup_key(self, char, /):
        """
        descriptor addressed by ``-char``, or None.

        only ascii-letter keys are resolved by character; an alias keeps its own
        letter even when its ancestor is NO_CHAR_KEY.
        """
        option = self._by_key.get(char)
        if option is None or not isletter(option.key):
            return None
        return option

    def isbuiltin(self, option, /):
        return option.key in self._builtins


def build(user_descriptors, builtin_descriptors=(), /):
    """
    Validate and merge descriptor tables into a Registry.

    parameters
    - user_descriptors: Iterable[Descriptor], the caller's table in declaration order.
    - builtin_descriptors: Iterable[Descriptor], placed before the caller's table.

    raises
    - TypeError when an entry is not a Descriptor.
    - a RegistryError subclass for any table-level defect (see module docstring).
    """
    if not isinstance(user_descriptors, Iterable) or not isinstance(builtin_descriptors, Iterable):
        raise TypeError("build() arguments must be iterables of descriptors")

    builtins = tuple(builtin_descriptors)
    table = builtins + tuple(user_descriptors)

    descriptors = []
    by_key = {}
    by_name = {}
    groups = []
    ancestor = None
    leading = False

    for option in table:
        if not isinstance(option, Descriptor):
            raise TypeError("build() arguments must be iterables of descriptors")

        if option.key in by_key:
            raise _fault(
                DuplicateKeyError,
                "the key %s of option --%s is already registered by option --%s" % (
                    _display(option.key), option.long_name, by_key[option.key].long_name
                ),
                FaultCode.DUPLICATE_KEY,
                "give --%s a key no other option uses" % option.long_name,
                descriptor=option,
            )
        if option.long_name in by_name:
            raise _fault(
                DuplicateNameError,
                "the long name --%s is registered twice" % option.long_name,
                FaultCode.DUPLICATE_NAME,
                "rename one of the two --%s options" % option.long_name,
                descriptor=option,
            )
        if option.key == 0:
            raise _fault(
                ReservedKeyError,
                "option --%s uses the key 0, which is reserved for positional arguments" % option.long_name,
                FaultCode.RESERVED_KEY,
                "use a letter, or another integer code together with NO_CHAR_KEY",
                descriptor=option,
            )
        if NO_CHAR_KEY in option.flags and isletter(option.key):
            raise _fault(
                InvalidKeyError,
                "option --%s is flagged NO_CHAR_KEY but its key %s is alphabetic" % (option.long_name, _display(option.key)),
                FaultCode.INVALID_KEY,
                "use a non-alphabetic key (for example an integer code) or drop NO_CHAR_KEY",
                descriptor=option,
            )
        if NO_CHAR_KEY not in option.flags and not isletter(option.key):
            raise _fault(
                InvalidKeyError,
                "option --%s has the key %s, but character keys must be ascii letters" % (option.long_name, _display(option.key)),
                FaultCode.INVALID_KEY,
                "use an ascii letter, or flag the option NO_CHAR_KEY",
                descriptor=option,
            )

        # required-groups are derived from the flags as declared
        if ALIAS not in option.flags and OPTIONAL not in option.flags:
            groups.append([option.key])
            leading = True
        elif ALIAS in option.flags and leading:
            groups[-1].append(option.key)
        else:
            leading = False

        if ALIAS in option.flags:
            if ancestor is None:
                raise _fault(
                    MalformedAliasError,
                    "alias --%s has no preceding non-alias option" % option.long_name,
                    FaultCode.MALFORMED_ALIAS,
                    "declare aliases right below the option they stand for",
                    descriptor=option,
                )
            option = copy.replace(
                option,
                flags=ancestor.flags | option.flags,
                arity=ancestor.arity,
                description=ancestor.description,
            )
        else:
            ancestor = option

        if not isinstance(option.arity, int) or option.arity < VARIADIC:
            raise _fault(
                InvalidArityError,
                "option --%s was registered with an invalid arity (%r)" % (option.long_name, option.arity),
                FaultCode.INVALID_ARITY,
                "use -1 (any number), 0 (none) or a positive count",
                descriptor=option,
            )

        descriptors.append(option)
        by_key[option.key] = option
        by_name[option.long_name] = option

    return Registry(descriptors, by_key, by_name, groups, (option.key for option in builtins))


def register(user_descriptors, /, *, defaults=True):
    """
    Build a Registry from the caller's table, merging the default option set
    (help, info, version) first unless defaults is False.
    """
    return build(user_descriptors, BUILTINS if defaults else ())


__all__ = (
    "Registry",
    "build",
    "register",
)
