"""Template parser: source text -> immutable node tuple.

Three block forms are recognised inside otherwise literal text::

    {{ expr }}                 output the value of ``expr``
    {% set name = expr %}      bind ``name`` for the rest of the render
    {# comment #}              dropped

Expression grammar::

    expr := atom ( "." identifier | "(" [expr ("," expr)*] ")" )*
    atom := string | number | true | false | none | identifier
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqltemplates.template.errors import ParseError
from sqltemplates.template.values import Bool, Nil, Num, Str, Value

# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Const:
    """A literal string, number, boolean or ``none``."""

    value: Value


@dataclass(frozen=True)
class Name:
    name: str
    position: int


@dataclass(frozen=True)
class Attr:
    """Attribute access: ``target.name``."""

    target: Expr
    name: str
    position: int


@dataclass(frozen=True)
class Call:
    """Function call: ``callee(arg, ...)``."""

    callee: Expr
    args: tuple[Expr, ...]
    position: int


Expr = Const | Name | Attr | Call


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Set:
    name: str
    expr: Expr


@dataclass(frozen=True)
class Output:
    expr: Expr


@dataclass(frozen=True)
class Comment:
    text: str


Node = Literal | Set | Output | Comment


@dataclass(frozen=True)
class Template:
    """A parsed template: the original source plus its ordered nodes."""

    source: str
    nodes: tuple[Node, ...]


# ---------------------------------------------------------------------------
# Expression tokenizer
# ---------------------------------------------------------------------------

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<number>-?\d+(?:\.\d+)?)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<punct>[.(),=])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", "'": "'", '"': '"'}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

_KEYWORDS = {"true": Bool(True), "false": Bool(False), "none": Nil()}

_BLOCK_CLOSERS = {"{{": "}}", "{%": "%}", "{#": "#}"}


@dataclass(frozen=True)
class _Token:
    kind: str  # number | string | name | punct | end
    text: str
    position: int


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), body)


class _ExprParser:
    """Recursive-descent parser over the tokens of one block."""

    def __init__(self, source: str, start: int, end: int) -> None:
        self._source = source
        self._end = end
        self._tokens = self._tokenize(start, end)
        self._index = 0

    def _tokenize(self, start: int, end: int) -> list[_Token]:
        tokens: list[_Token] = []
        pos = start
        while pos < end:
            match = _TOKEN_RE.match(self._source, pos, end)
            if match is None:
                raise ParseError(
                    f"unexpected character {self._source[pos]!r}", self._source, pos
                )
            kind = match.lastgroup or ""
            if kind != "ws":
                tokens.append(_Token(kind, match.group(), pos))
            pos = match.end()
        tokens.append(_Token("end", "", end))
        return tokens

    # -- token helpers -------------------------------------------------------

    def peek(self) -> _Token:
        return self._tokens[self._index]

    def advance(self) -> _Token:
        token = self._tokens[self._index]
        if token.kind != "end":
            self._index += 1
        return token

    def expect(self, kind: str, text: str | None = None) -> _Token:
        token = self.peek()
        if token.kind != kind or (text is not None and token.text != text):
            wanted = repr(text) if text is not None else kind
            found = repr(token.text) if token.kind != "end" else "end of block"
            raise ParseError(f"expected {wanted}, found {found}", self._source, token.position)
        return self.advance()

    def expect_end(self) -> None:
        token = self.peek()
        if token.kind != "end":
            raise ParseError(f"unexpected token {token.text!r}", self._source, token.position)

    # -- grammar -------------------------------------------------------------

    def parse_expr(self) -> Expr:
        expr = self._parse_atom()
        while True:
            token = self.peek()
            if token.kind == "punct" and token.text == ".":
                self.advance()
                attr = self.expect("name")
                expr = Attr(target=expr, name=attr.text, position=attr.position)
            elif token.kind == "punct" and token.text == "(":
                self.advance()
                expr = Call(callee=expr, args=self._parse_args(), position=token.position)
            else:
                return expr

    def _parse_args(self) -> tuple[Expr, ...]:
        args: list[Expr] = []
        if self.peek().text == ")" and self.peek().kind == "punct":
            self.advance()
            return ()
        while True:
            args.append(self.parse_expr())
            token = self.advance()
            if token.kind == "punct" and token.text == ")":
                return tuple(args)
            if not (token.kind == "punct" and token.text == ","):
                found = repr(token.text) if token.kind != "end" else "end of block"
                raise ParseError(
                    f"expected ',' or ')' in argument list, found {found}",
                    self._source,
                    token.position,
                )

    def _parse_atom(self) -> Expr:
        token = self.advance()
        match token.kind:
            case "number":
                number = float(token.text) if "." in token.text else int(token.text)
                return Const(Num(number))
            case "string":
                return Const(Str(_unescape(token.text[1:-1])))
            case "name" if token.text in _KEYWORDS:
                return Const(_KEYWORDS[token.text])
            case "name":
                return Name(name=token.text, position=token.position)
            case "end":
                raise ParseError("expected an expression", self._source, token.position)
            case _:
                raise ParseError(
                    f"unexpected token {token.text!r}", self._source, token.position
                )


# ---------------------------------------------------------------------------
# Block scanner
# ---------------------------------------------------------------------------


def _find_block_end(source: str, opener: str, start: int) -> int:
    """Return the index of the closing delimiter for the block opened at ``start``.

    Quoted strings inside ``{{ }}`` and ``{% %}`` may contain the closing
    delimiter; comments are scanned verbatim.
    """
    closer = _BLOCK_CLOSERS[opener]
    pos = start + 2
    if opener == "{#":
        end = source.find(closer, pos)
        if end < 0:
            raise ParseError("unterminated comment", source, start)
        return end

    length = len(source)
    while pos < length:
        char = source[pos]
        if char in "\"'":
            quote_start = pos
            pos += 1
            while pos < length and source[pos] != char:
                pos += 2 if source[pos] == "\\" else 1
            if pos >= length:
                raise ParseError("unterminated string literal", source, quote_start)
        elif source.startswith(closer, pos):
            return pos
        pos += 1
    kind = "expression" if opener == "{{" else "statement"
    raise ParseError(f"unterminated {kind} block, expected {closer!r}", source, start)


def _parse_statement(source: str, start: int, end: int) -> Set:
    parser = _ExprParser(source, start, end)
    keyword = parser.peek()
    if keyword.kind == "end":
        raise ParseError("empty statement block", source, keyword.position)
    if keyword.kind != "name" or keyword.text != "set":
        raise ParseError(f"unknown statement keyword {keyword.text!r}", source, keyword.position)
    parser.advance()
    target = parser.expect("name")
    if target.text in _KEYWORDS:
        raise ParseError(f"cannot assign to {target.text!r}", source, target.position)
    parser.expect("punct", "=")
    expr = parser.parse_expr()
    parser.expect_end()
    return Set(name=target.text, expr=expr)


def _parse_output(source: str, start: int, end: int) -> Output:
    parser = _ExprParser(source, start, end)
    expr = parser.parse_expr()
    parser.expect_end()
    return Output(expr=expr)


def parse_template(source: str) -> Template:
    """Parse template source into a :class:`Template`.

    Raises:
        ParseError: On malformed syntax, with the offending position.
    """
    nodes: list[Node] = []
    text_start = 0
    pos = 0
    length = len(source)
    while pos < length:
        opener = source[pos : pos + 2]
        if opener not in _BLOCK_CLOSERS:
            pos += 1
            continue
        if pos > text_start:
            nodes.append(Literal(source[text_start:pos]))
        end = _find_block_end(source, opener, pos)
        inner_start = pos + 2
        if opener == "{{":
            nodes.append(_parse_output(source, inner_start, end))
        elif opener == "{%":
            nodes.append(_parse_statement(source, inner_start, end))
        else:
            nodes.append(Comment(source[inner_start:end]))
        pos = text_start = end + 2
    if text_start < length:
        nodes.append(Literal(source[text_start:]))
    return Template(source=source, nodes=tuple(nodes))
