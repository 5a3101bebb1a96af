"""RIB parser: turn ASCII RIB text into procedure calls on a :class:`Renderer`.

Each request is read as its name followed by every value up to the next
request name. Positional arguments are taken from the front according to the
procedure table's argument kinds; whatever is left must be ``"token" value``
pairs and becomes the :class:`ParamList`.

Errors never stop the parse. Bad characters, malformed arguments and unknown
requests are reported to the :class:`ErrorHandler` and parsing resumes at
the next request (or the next line, for lexer errors).

Comments are passed on as ``ArchiveRecord("comment", text)`` and
``ArchiveRecord("structure", text)`` after the request they interrupt.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ristream.core.contracts.params import Param, ParamList
from ristream.core.errors import ErrorCode, ErrorHandler, RibSyntaxError
from ristream.core.settings import get_logger
from ristream.ri.procedures import ARRAY_KINDS, FIXED_SIZES, PROCEDURES, ProcSpec
from ristream.ri.renderer import Renderer

from .lexer import Token, TokenType, tokenize

logger = get_logger("ristream.rib")

# Types for parameters commonly used without a Declare.
STANDARD_DECLARATIONS: dict[str, str] = {
    "P": "vertex point",
    "Pz": "vertex float",
    "Pw": "vertex hpoint",
    "N": "varying normal",
    "Np": "uniform normal",
    "Cs": "varying color",
    "Os": "varying color",
    "s": "varying float",
    "t": "varying float",
    "st": "varying float[2]",
    "width": "varying float",
    "constantwidth": "constant float",
    "Ka": "uniform float",
    "Kd": "uniform float",
    "Ks": "uniform float",
    "roughness": "uniform float",
    "intensity": "float",
    "lightcolor": "color",
    "from": "point",
    "to": "point",
    "fov": "float",
    "texturename": "string",
}

# Requests whose handle argument may be written as a number.
_HANDLE_PROCS = frozenset({"ObjectBegin", "ObjectInstance"})

_RECORD_TYPES = {TokenType.COMMENT: "comment", TokenType.STRUCTURE: "structure"}

Value = int | float | str | list[Any]


class _ArgError(Exception):
    """Malformed request arguments; caught and reported by the parser."""


class RibParser:
    """Stateful RIB reader.

    Attributes
    ----------
    declarations : dict[str, str]
        Parameter name -> declared type; seeded with
        :data:`STANDARD_DECLARATIONS` and extended by every ``Declare``.
    """

    def __init__(self, renderer: Renderer, error_handler: ErrorHandler | None = None) -> None:
        self.renderer = renderer
        self.errors = error_handler if error_handler is not None else ErrorHandler()
        self.declarations: dict[str, str] = dict(STANDARD_DECLARATIONS)

    # ------------------------------- Entry ----------------------------------

    def parse(self, text: str) -> int:
        """Parse ``text`` and issue its requests; return how many were issued."""
        tokens = self._lex(text)
        issued = 0
        i = 0
        while i < len(tokens):
            tok = tokens[i]
            if tok.type in _RECORD_TYPES:
                self.renderer.archive_record(_RECORD_TYPES[tok.type], str(tok.value))
                i += 1
                continue
            if tok.type is not TokenType.NAME:
                self.errors.report(
                    ErrorCode.SYNTAX, f"line {tok.line}: expected a request, found {tok.value!r}"
                )
                i += 1
                continue
            values, records, i = self._collect(tokens, i + 1)
            if self._request(tok, values):
                issued += 1
            for rtype, text_ in records:
                self.renderer.archive_record(rtype, text_)
        logger.debug("parsed %d requests", issued)
        return issued

    # ------------------------------- Lexing ---------------------------------

    def _lex(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        start, line = 0, 1
        while True:
            try:
                for tok in tokenize(text, start, line):
                    tokens.append(tok)
                return tokens
            except RibSyntaxError as e:
                self.errors.report(ErrorCode.SYNTAX, str(e))
                pos = e.pos if e.pos is not None else len(text)
                nl = text.find("\n", pos)
                if nl < 0:
                    return tokens
                start, line = nl, e.line

    def _collect(
        self, tokens: list[Token], i: int
    ) -> tuple[list[tuple[Value, int]], list[tuple[str, str]], int]:
        """Gather argument values after a request name.

        Returns the values (each with its line), the comments met on the way,
        and the index of the next request.
        """
        values: list[tuple[Value, int]] = []
        records: list[tuple[str, str]] = []
        while i < len(tokens):
            tok = tokens[i]
            if tok.type in _RECORD_TYPES:
                records.append((_RECORD_TYPES[tok.type], str(tok.value)))
                i += 1
            elif tok.type is TokenType.LBRACKET:
                arr: list[Any] = []
                i += 1
                while i < len(tokens) and tokens[i].type in (TokenType.NUMBER, TokenType.STRING):
                    arr.append(tokens[i].value)
                    i += 1
                if i < len(tokens) and tokens[i].type is TokenType.RBRACKET:
                    i += 1
                else:
                    # Unterminated or nested array: poison the request.
                    values.append((_Broken(tok.line), tok.line))  # type: ignore[arg-type]
                values.append((arr, tok.line))
            elif tok.type in (TokenType.NUMBER, TokenType.STRING):
                values.append((tok.value, tok.line))
                i += 1
            elif tok.type is TokenType.RBRACKET:
                values.append((_Broken(tok.line), tok.line))  # type: ignore[arg-type]
                i += 1
            else:
                break
        return values, records, i

    # ------------------------------ Requests --------------------------------

    def _request(self, tok: Token, values: list[tuple[Value, int]]) -> bool:
        name = str(tok.value)
        if name == "version":
            return False
        spec = PROCEDURES.get(name)
        if spec is None:
            self.errors.report(ErrorCode.BAD_TOKEN, f'line {tok.line}: unknown request "{name}"')
            return False
        for v, line in values:
            if isinstance(v, _Broken):
                self.errors.report(ErrorCode.SYNTAX, f"line {line}: {name}: malformed array")
                return False
        try:
            args, rest = self._positional(spec, [v for v, _ in values])
            params = self._params(spec, rest) if spec.has_params else None
            if not spec.has_params and rest:
                raise _ArgError(f"expected {spec.arity} arguments, got {len(values)}")
        except (_ArgError, ValidationError) as e:
            self.errors.report(ErrorCode.SYNTAX, f"line {tok.line}: {name}: {e}")
            return False
        if name == "Declare":
            self.declarations[str(args[0])] = str(args[1])
        self.renderer.call(name, *args, params=params)
        return True

    def _positional(self, spec: ProcSpec, vals: list[Value]) -> tuple[list[Any], list[Value]]:
        if spec.name == "Procedural":
            return self._procedural(vals)
        args: list[Any] = []
        i = 0
        for arg, kind in spec.args:
            if spec.name == "ReadArchive" and arg == "callback":
                args.append(None)
                continue
            if kind in FIXED_SIZES:
                value, i = self._fixed(kind, vals, i, arg)
                args.append(value)
                continue
            if i >= len(vals):
                raise _ArgError(f"missing argument {arg!r}")
            args.append(self._convert(spec, arg, kind, vals[i]))
            i += 1
        return args, vals[i:]

    def _convert(self, spec: ProcSpec, arg: str, kind: str, v: Value) -> Any:
        if kind in ARRAY_KINDS:
            if not isinstance(v, list):
                raise _ArgError(f"{arg!r} must be an array")
            elem = kind[:-2]
            return [self._scalar(elem, x, arg) for x in v]
        if isinstance(v, list):
            if len(v) != 1:
                raise _ArgError(f"{arg!r} must be a single value")
            v = v[0]
        if kind in ("token", "string") and spec.name in _HANDLE_PROCS and not isinstance(v, str):
            return str(v)
        if kind in ("func", "pointer"):
            kind = "string"
        return self._scalar(kind, v, arg)

    @staticmethod
    def _scalar(kind: str, v: Any, arg: str) -> Any:
        if kind in ("token", "string"):
            if not isinstance(v, str):
                raise _ArgError(f"{arg!r} must be a string")
            return v
        if isinstance(v, str):
            raise _ArgError(f"{arg!r} must be a number")
        if kind == "int":
            if isinstance(v, float) and not v.is_integer():
                raise _ArgError(f"{arg!r} must be an integer")
            return int(v)
        if kind == "bool":
            return bool(v)
        return float(v)

    @staticmethod
    def _fixed(kind: str, vals: list[Value], i: int, arg: str) -> tuple[Any, int]:
        size = FIXED_SIZES[kind]
        if i >= len(vals):
            raise _ArgError(f"missing argument {arg!r}")
        v = vals[i]
        if kind == "basis" and isinstance(v, str):
            return v, i + 1
        if isinstance(v, list):
            items, i = v, i + 1
        else:
            items, i = vals[i : i + size], i + size
        if len(items) != size or not all(isinstance(x, int | float) for x in items):
            raise _ArgError(f"{arg!r} needs {size} numbers")
        return [float(x) for x in items], i  # type: ignore[arg-type]

    def _procedural(self, vals: list[Value]) -> tuple[list[Any], list[Value]]:
        # RIB order: "subdivfunc" [data] [bound]
        if len(vals) < 3:
            raise _ArgError("expected a name, a data array and a bound")
        name, data, bound = vals[0], vals[1], vals[2]
        if not isinstance(name, str):
            raise _ArgError("procedural name must be a string")
        if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
            raise _ArgError("procedural data must be an array of strings")
        box, _ = self._fixed("bound", [bound], 0, "bound")
        return [data, box, name, None], vals[3:]

    def _params(self, spec: ProcSpec, rest: list[Value]) -> ParamList:
        if len(rest) % 2:
            raise _ArgError("parameter list must be token/value pairs")
        items: list[Param] = []
        for token, value in zip(rest[::2], rest[1::2], strict=True):
            if not isinstance(token, str):
                raise _ArgError(f"expected a parameter name, found {token!r}")
            declared = self.declarations.get(token, "")
            items.append(Param.parse(token, value, declared))
        return ParamList(items=tuple(items))


class _Broken:
    """Placeholder value for an array that failed to parse."""

    __slots__ = ("line",)

    def __init__(self, line: int) -> None:
        self.line = line


def parse_rib(
    text: str, renderer: Renderer, error_handler: ErrorHandler | None = None
) -> int:
    """Convenience wrapper: parse ``text`` into ``renderer``."""
    return RibParser(renderer, error_handler).parse(text)


__all__ = ["RibParser", "STANDARD_DECLARATIONS", "parse_rib"]
