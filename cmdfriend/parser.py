"""
Cmdfriend parser: dispatch argv tokens against a registry.

What this module provides
- Mode: the parse policy (strict unknown options, default options, terminate on
  error, fault stream, deferred collection, fancy/colorful rendering).
- Session: the transient state of one parse call (cursor, passed keys,
  informational flag, outstanding arguments, deferred faults) and the three
  phases that run over it:
  • dispatch: classify every token (long option, short option bundle, positional).
  • consume: take the trailing arguments an option's arity asks for.
  • validate: check outstanding arguments and required-groups once at the end.
- parse(): build or accept a registry, normalize argv, run a session.

Token classes
- "--name"      → long option, looked up by long name.
- "-abc"        → short options, looked up by key one character at a time;
                  only zero-arity options may share a token.
- anything else → positional, delivered with the sentinel key 0 and its index.

Callback contract
- callback(key, argument, index, context)
  • key: the option key, or 0 for positionals.
  • argument: the argument text, or None for zero-arity options.
  • index: position of the argument within its option (0..), or the argv index
    of a positional token.
  • context: the caller's context object, passed through untouched.
- the return value is ignored.

Fault policy
- Mode.terminate=False: faults are raised to the caller.
- Mode.terminate=True: faults are printed on Mode.stream and the process exits.
- Mode.deferred=True: parse faults are collected and raised together as a
  CommandExit once the run is over (registry faults are never deferred).
- Unknown tokens are skipped unless Mode.strict is set.

Quick example:
    >>> from cmdfriend import Descriptor, OPTIONAL, parse
    >>> calls = []
    >>> table = [
    ...     Descriptor("where", "w", (), 1, "Where to create the project"),
    ...     Descriptor("verbose", "v", OPTIONAL, 0, "Verbose mode"),
    ... ]
    >>> _ = parse(table, ["-w", "proj", "-v"], lambda *call: calls.append(call[:3]))
    >>> calls
    [('w', 'proj', 0), ('v', None, 0)]
"""
import copy
import shlex
import sys
from collections.abc import Iterable

from .defaults import Info, render
from .faults import *
from .options import *
from .registry import Registry, register
from .utils import *


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _isswitch(token):
    return token.startswith("-") and len(token) > 1


class Mode(metaclass=RecordType):
    """
    Parse policy.

    - strict: unknown options are faults instead of being skipped.
    - defaults: merge help/info/version when parse() builds the registry.
    - terminate: print faults and exit(1) instead of raising them.
    - stream: where fault text is printed (Stream.STDOUT or Stream.STDERR).
    - deferred: collect parse faults and raise them together at the end.
    - fancy: render faults and built-in output inside panels.
    - colorful: style rendered output.
    """

    __introspectable__ = (
        "strict",
        "defaults",
        "terminate",
        "stream",
        "deferred",
        "fancy",
        "colorful",
    )

    def __init__(
            self,
            strict=False,
            defaults=True,
            terminate=False,
            stream=Stream.STDERR,
            deferred=False,
            fancy=False,
            colorful=True,
    ):
        metadata = {
            "strict": strict,
            "defaults": defaults,
            "terminate": terminate,
            "deferred": deferred,
            "fancy": fancy,
            "colorful": colorful,
        }
        for name, value in metadata.items():
            if not isinstance(value, bool):
                raise TypeError(f"{type(self).__typename__} {name!r} must be a boolean")
        try:
            metadata["stream"] = Stream(stream)
        except ValueError:
            raise ValueError(f"{type(self).__typename__} 'stream' must be 'stdout' or 'stderr'") from None

        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)


class Session:
    """
    State of one parse call. Owned by parse(); never reused across calls.

    Read-only views
    - passed: frozenset of option keys observed on the command line.
    - informational: True when a built-in (help/info/version) fired.
    - faults: faults collected so far under deferred mode.
    """

    __introspectable__ = (
        "registry",
        "argv",
        "cursor",
        "passed",
        "informational",
        "faults",
    )

    registry = mirror("registry")
    argv = mirror("argv")
    cursor = mirror("cursor")
    passed = mirror("passed")
    informational = mirror("informational")
    faults = mirror("faults")

    def __init__(self, registry, argv, callback, mode, context, info, /):
        self._registry = registry
        self._argv = tuple(argv)
        self._callback = callback
        self._mode = mode
        self._context = context
        self._info = info

        self._cursor = 0
        self._passed = set()
        self._informational = False
        self._outstanding = Unset
        self._faults = []

    def __repr__(self):
        return "session(cursor=%d, passed=%r, informational=%r)" % (self._cursor, self._passed, self._informational)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with the mode's rendering options merged in.

        Under deferred mode, parse faults are stored and control returns to the
        caller, which must then skip whatever the fault was about.
        """
        fault = copy.replace(
            fault,
            **options,
            prog=self._info.prog,
            terminate=self._mode.terminate,
            stream=self._mode.stream,
            fancy=self._mode.fancy,
            colorful=self._mode.colorful,
        )
        if self._mode.deferred and isinstance(fault, ParseError):
            return self._faults.append(fault)
        trigger(fault)

    def _invoke(self, option, argument, index):
        if self._registry.isbuiltin(option):
            self._informational = True
            render(option.key, self._registry, self._info, colorful=self._mode.colorful, fancy=self._mode.fancy)
            return
        self._callback(option.key, argument, index, self._context)

    def _following(self, limit=None):
        """
        tokens after the cursor up to the next option boundary (at most limit).
        """
        values = []
        for token in self._argv[self._cursor + 1:]:
            if _isswitch(token) or (limit is not None and len(values) == limit):
                break
            values.append(token)
        return values

    def _consume(self, option):
        """
        consume the arguments of an option sitting at the cursor.

        the cursor is left on the last consumed token, so the dispatch loop
        resumes at the option boundary that stopped the consumption.
        """
        start = self._cursor

        match option.arity:
            case 0:
                self._invoke(option, None, 0)

            case -1:
                values = self._following()
                if not values:
                    return self.trigger(MissingArgumentError(
                        "option %s at %s position needs at least one argument" % (option.label, _ordinal(start + 1)),
                        title="missing argument",
                        code=FaultCode.MISSING_ARGUMENT,
                        hint="pass one or more values after %s" % option.label,
                        descriptor=option,
                        index=start,
                        docs=getdoc(FaultCode.MISSING_ARGUMENT),
                    ))
                self._cursor += len(values)
                for index, value in enumerate(values):
                    self._invoke(option, value, index)

            case int(arity) if arity > 0:
                values = self._following(arity)
                self._cursor += len(values)

                if len(values) < arity:
                    if self._cursor + 1 >= len(self._argv):
                        # ran out of input; reported by the validator
                        self._outstanding = (option, len(values), start)
                        return
                    return self.trigger(TooFewArgumentsError(
                        "option %s at %s position takes %s but got %d" % (
                            option.label, _ordinal(start + 1), quantify(arity, "argument"), len(values)
                        ),
                        title="too few arguments",
                        code=FaultCode.TOO_FEW_ARGUMENTS,
                        hint="pass exactly %s after %s" % (quantify(arity, "argument"), option.label),
                        descriptor=option,
                        index=start,
                        received=tuple(values),
                        docs=getdoc(FaultCode.TOO_FEW_ARGUMENTS),
                    ))

                if extra := self._following():
                    self._cursor += len(extra)
                    return self.trigger(TooManyArgumentsError(
                        "option %s at %s position takes only %s, extra %r at %s position" % (
                            option.label, _ordinal(start + 1), quantify(arity, "argument"), extra[0],
                            _ordinal(start + arity + 2)
                        ),
                        title="too many arguments",
                        code=FaultCode.TOO_MANY_ARGUMENTS,
                        hint="remove the extra values, %s takes exactly %s" % (option.label, quantify(arity, "argument")),
                        descriptor=option,
                        index=start,
                        extra=tuple(extra),
                        docs=getdoc(FaultCode.TOO_MANY_ARGUMENTS),
                    ))

                for index, value in enumerate(values):
                    self._invoke(option, value, index)

            case _:
                self.trigger(InvalidArityError(
                    "option %s was registered with an invalid arity (%r)" % (option.label, option.arity),
                    title="invalid arity",
                    code=FaultCode.INVALID_ARITY,
                    hint="use -1 (any number), 0 (none) or a positive count",
                    descriptor=option,
                    docs=getdoc(FaultCode.INVALID_ARITY),
                ))

    def _unknown(self, name, token):
        if not self._mode.strict:
            return
        self.trigger(UnknownOptionError(
            "unknown option %r at %s position" % (name, _ordinal(self._cursor + 1)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="try '%s --help' to see all available options" % self._info.prog,
            input=name,
            token=token,
            index=self._cursor,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ))

    def _step(self, token):
        if token.startswith("--"):
            if (option := self._registry.lookup_name(token[2:])) is None:
                return self._unknown(token, token)
            if NO_LONG_KEY in option.flags:
                return
            self._passed.add(option.key)
            return self._consume(option)

        if _isswitch(token):
            chars = token[1:]
            for char in chars:
                if (option := self._registry.lookup_key(char)) is None:
                    self._unknown("-" + char, token)
                    continue
                if len(chars) > 1 and option.arity != 0:
                    self.trigger(NestedArityError(
                        "option %s in %r at %s position takes arguments and cannot be bundled" % (
                            option.label, token, _ordinal(self._cursor + 1)
                        ),
                        title="nested option with arguments",
                        code=FaultCode.NESTED_ARITY,
                        hint="only options without arguments can share a single '-'; pass -%s on its own" % char,
                        descriptor=option,
                        token=token,
                        index=self._cursor,
                        docs=getdoc(FaultCode.NESTED_ARITY),
                    ))
                    continue
                self._passed.add(option.key)
                self._consume(option)
            return

        # argv excludes the program name, so the index is 0-based over the arguments
        self._callback(0, token, self._cursor, self._context)

    def _dispatch(self):
        while self._cursor < len(self._argv):
            self._step(self._argv[self._cursor])
            self._cursor += 1

    def _validate(self):
        if self._informational:
            return

        if self._outstanding:
            option, received, start = self._outstanding
            self.trigger(TooFewArgumentsError(
                "option %s at %s position takes %s but the input ended after %d" % (
                    option.label, _ordinal(start + 1), quantify(option.arity, "argument"), received
                ),
                title="too few arguments",
                code=FaultCode.TOO_FEW_ARGUMENTS,
                hint="pass exactly %s after %s" % (quantify(option.arity, "argument"), option.label),
                descriptor=option,
                index=start,
                docs=getdoc(FaultCode.TOO_FEW_ARGUMENTS),
            ))

        for group in self._registry.groups:
            if self._passed.isdisjoint(group):
                lead = self._registry.by_key[group[0]]
                aliases = [self._registry.by_key[key].label for key in group[1:]]
                self.trigger(MissingRequiredOptionError(
                    "the option %s needs to be specified" % lead.label,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint="add %s%s" % (lead.label, " (or one of: %s)" % ", ".join(aliases) if aliases else ""),
                    descriptor=lead,
                    group=group,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
                ))

    def _finalize(self):
        if not self._faults:
            return
        trigger(
            CommandExit(self._faults),
            prog=self._info.prog,
            terminate=self._mode.terminate,
            stream=self._mode.stream,
            fancy=self._mode.fancy,
            colorful=self._mode.colorful,
        )

    def run(self):
        """
        dispatch every token, validate, surface deferred faults; return self.
        """
        self._dispatch()
        self._validate()
        self._finalize()
        return self


def _noop(key, argument, index, context):
    pass


def _tokens(argv):
    if argv is Unset:
        return sys.argv[1:]
    elif isinstance(argv, str):
        return shlex.split(argv)
    elif isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argv must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argv must be a string or an iterable of strings")


def parse(source, argv=Unset, callback=Unset, /, mode=Unset, context=None, *, info=Unset):
    """
    Parse argv against an option table and report every option to callback.

    parameters
    - source: Registry | Iterable[Descriptor]
      a pre-built registry (used as-is) or the caller's descriptor table, which
      is registered on the spot (with the default options when mode.defaults).
    - argv: Unset | str | Iterable[str]
      • Unset: sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: used as-is (the program name must not be included).
    - callback: callable(key, argument, index, context); defaults to a no-op.
    - mode: Mode; defaults to Mode().
    - context: any object, handed to every callback call.
    - info: Info (see configure()); defaults to Info().

    returns
    - the finished Session (see Session.passed and Session.informational).

    raises
    - RegistryError subclasses for defects of the option table.
    - ParseError subclasses (or CommandExit under deferred mode) for bad argv.
    - SystemExit(1) instead of the above when mode.terminate is set.
    """
    mode = coalesce(mode, Mode())
    info = coalesce(info, Info())
    callback = coalesce(callback, _noop)

    if not isinstance(mode, Mode):
        raise TypeError("parse() mode must be a Mode")
    if not isinstance(info, Info):
        raise TypeError("parse() info must be an Info")
    if not callable(callback):
        raise TypeError("parse() callback must be callable")

    if isinstance(source, Registry):
        registry = source
    else:
        try:
            registry = register(source, defaults=mode.defaults)
        except RegistryError as fault:
            trigger(
                fault,
                prog=info.prog,
                terminate=mode.terminate,
                stream=mode.stream,
                fancy=mode.fancy,
                colorful=mode.colorful,
            )

    return Session(registry, _tokens(argv), callback, mode, context, info).run()


__all__ = (
    "Mode",
    "Session",
    "parse",
)
