"""
Cmdfriend default option set (help, version, info) and its renderers.

What this module provides
- BuiltinKey: the reserved integer codes of the three built-in options.
- BUILTINS: the built-in descriptors, merged first into every registry built
  with defaults enabled. All three take no arguments and are optional.
- Info / configure(): the informational strings shown by the built-ins
  (program name, usage banner, version, contact). They are an explicit value
  passed to parse(), never process-wide state.
- render(): route a fired built-in key to its renderer.

Rendering
- Output goes to stdout through rich, honoring colorful/fancy.
- help lists every non-hidden descriptor (built-ins first) as
  "-k (--long): description [arity]", with a variadic arity shown as "n";
  the built-ins are listed without an arity.
- version/info print the configured string, or nothing when unset.
- Palette entries can be overridden through a __styles__ mapping in __main__.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .options import *
from .utils import *


class BuiltinKey(IntEnum):
    """
    reserved codes of the built-in options (non-alphabetic, never 0).
    """
    INFO = 123
    VERSION = 124
    HELP = 125


BUILTINS = (
    Descriptor("help", BuiltinKey.HELP, {OPTIONAL, NO_CHAR_KEY}, 0, "Shows this help menu"),
    Descriptor("info", BuiltinKey.INFO, {OPTIONAL, NO_CHAR_KEY}, 0, "Shows information about the program"),
    Descriptor("version", BuiltinKey.VERSION, {OPTIONAL, NO_CHAR_KEY}, 0, "Shows program version"),
)


def _process_strings(cls, metadata):
    """
    Validate the scalar string fields of Info: str | Unset, non-empty once trimmed.
    Unset becomes None.
    """
    for name in ("prog", "usage", "version", "contact"):
        if not isinstance(object := metadata[name], str | None | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)


class Info(metaclass=RecordType):
    """
    Informational strings used by the built-in options and by fault headers.

    - prog: program name shown in fault headers (defaults to basename of argv[0]).
    - usage: banner printed by --help before the option list.
    - version: printed by --version.
    - contact: printed by --info.
    """

    __introspectable__ = (
        "prog",
        "usage",
        "version",
        "contact",
    )

    def __init__(self, prog=Unset, usage=Unset, version=Unset, contact=Unset):
        metadata = {
            "prog": prog,
            "usage": usage,
            "version": version,
            "contact": contact,
        }
        _process_strings(type(self), metadata)
        if metadata["prog"] is None:
            metadata["prog"] = os.path.basename(sys.argv[0]) or "cmdfriend"

        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)


def configure(usage=Unset, version=Unset, contact=Unset, *, prog=Unset):
    """
    Build the informational strings passed to parse(info=...).

    Every argument is optional; an unset string makes its built-in print nothing
    (or, for usage, skip the banner).
    """
    return Info(prog=prog, usage=usage, version=version, contact=contact)


def _arity(arity):
    return "n" if arity == VARIADIC else str(arity)


def _helper(registry, info, *, colorful=True, fancy=False):
    """
    Render the help menu to stdout.

    Palette keys
    - usage-section, option-name, alias-name, argument-description, arity, panel-title
    """
    styles = defaultdict(str, {
        "usage-section": "bold #36C5F0",  # SKY-BLUE banner
        "option-name": "bold #00E6FF",  # CYAN for options
        "alias-name": "bold #22C55E",  # GREEN for aliases
        "argument-description": "#9CA3AF",  # Muted gray
        "arity": "bold #FFD600",  # AMBER for arity
        "panel-title": "bold #FF4D94",  # Magenta branding
    } | getattr(__import__('__main__'), "__styles__", {}))

    def text(fragment, style=""):
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    renders = []

    if info.usage:
        renders.append(text(info.usage, "usage-section"))
        renders.append(Text(""))

    for option in registry:
        if HIDDEN in option.flags:
            continue
        style = "alias-name" if ALIAS in option.flags else "option-name"
        line = Text("  ")
        if option.short and option.long:
            line.append_text(Text.assemble(text(option.short, style), " (", text(option.long, style), ")"))
        else:
            line.append_text(text(option.short or option.long or option.long_name, style))
        if option.description:
            line.append(": ")
            line.append_text(text(option.description, "argument-description"))
        if option.key not in registry.builtins:
            line.append_text(Text.assemble(" [", text(_arity(option.arity), "arity"), "]"))
        renders.append(line)

    console = Console()
    if fancy:
        console.print(Panel(Group(*renders), title=text(info.prog, "panel-title"), title_align="left"))
    else:
        console.print(Group(*renders))


def _versioner(info, *, colorful=True, fancy=False):
    """
    Render the configured version string to stdout (nothing when unset).
    """
    if not info.version:
        return
    style = getattr(__import__('__main__'), "__styles__", {}).get("program-version", "bold #00E6FF")
    version = Text(info.version, style if colorful else "")
    if fancy:
        version = Panel(version, title=info.prog, title_align="left")
    Console().print(version)


def _informer(info, *, colorful=True, fancy=False):
    """
    Render the configured contact string to stdout (nothing when unset).
    """
    if not info.contact:
        return
    style = getattr(__import__('__main__'), "__styles__", {}).get("contact-section", "#22C55E")
    contact = Text(info.contact, style if colorful else "")
    if fancy:
        contact = Panel(contact, title=info.prog, title_align="left")
    Console().print(contact)


def render(key, registry, info, /, *, colorful=True, fancy=False):
    """
    Run the renderer bound to a built-in key.

    Raises
    - ValueError: when key is not a built-in key.
    """
    match key:
        case BuiltinKey.HELP:
            _helper(registry, info, colorful=colorful, fancy=fancy)
        case BuiltinKey.VERSION:
            _versioner(info, colorful=colorful, fancy=fancy)
        case BuiltinKey.INFO:
            _informer(info, colorful=colorful, fancy=fancy)
        case _:
            raise ValueError(f"render() argument must be a built-in key, not {key!r}")


__all__ = (
    "BuiltinKey",
    "BUILTINS",
    "Info",
    "configure",
    "render",
)
