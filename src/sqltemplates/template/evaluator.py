"""Expression evaluation against a render context."""

from __future__ import annotations

from sqltemplates.dialect.base import DialectInfo
from sqltemplates.template.context import Context
from sqltemplates.template.dispatch import find_callable
from sqltemplates.template.errors import EvalError, NoSuchMacroError
from sqltemplates.template.macros import MacroSnapshot
from sqltemplates.template.parser import Attr, Call, Const, Expr, Name
from sqltemplates.template.values import Func, Handle, Map, Value, type_name


class Evaluator:
    """Evaluates expression nodes for one render.

    A bare name resolves to a context binding first, then a macro for the
    active dialect, then a builtin.
    """

    def __init__(self, dialect: DialectInfo, context: Context, snapshot: MacroSnapshot) -> None:
        self._dialect = dialect
        self._context = context
        self._snapshot = snapshot

    def evaluate(self, expr: Expr) -> Value:
        match expr:
            case Const(value=value):
                return value
            case Name(name=name):
                return self._lookup(name, calling=False)
            case Attr(target=target, name=name):
                return self._attribute(self.evaluate(target), name)
            case Call(callee=callee, args=args):
                fn = self._callee(callee)
                values = tuple(self.evaluate(a) for a in args)
                return fn(*values)
            case _:
                raise EvalError(f"unknown expression node {type(expr).__name__}")

    def _callee(self, callee: Expr) -> Func:
        if isinstance(callee, Name):
            value = self._lookup(callee.name, calling=True)
        else:
            value = self.evaluate(callee)
        if not isinstance(value, Func):
            raise EvalError(f"{type_name(value)} value is not callable")
        return value

    def _lookup(self, name: str, calling: bool) -> Value:
        value = self._context.get(name)
        if value is not None:
            return value
        fn = find_callable(name, self._dialect, self._context, self._snapshot)
        if fn is not None:
            return fn
        if calling:
            raise NoSuchMacroError(self._dialect.name, name)
        raise EvalError(f"undefined variable '{name}'")

    @staticmethod
    def _attribute(target: Value, name: str) -> Value:
        match target:
            case Handle() | Map():
                value = target.get(name)
                if value is None:
                    raise EvalError(f"{type_name(target)} has no attribute '{name}'")
                return value
            case _:
                raise EvalError(f"cannot read attribute '{name}' of {type_name(target)} value")
