"""Error taxonomy for template parsing and rendering."""

from __future__ import annotations

from sqltemplates.models.errors import ErrorDetail, SourcePosition


class TemplateError(Exception):
    """Base class for every error raised while parsing or rendering a template."""

    code = "TEMPLATE_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message)


class ParseError(TemplateError):
    """Malformed template syntax, an unterminated block, or an unknown statement."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, source: str, position: int) -> None:
        self.reason = message
        self.position = position
        self.line = source.count("\n", 0, position) + 1
        self.column = position - (source.rfind("\n", 0, position) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.reason,
            position=SourcePosition(offset=self.position, line=self.line, column=self.column),
        )


class EvalError(TemplateError):
    """Missing variable or attribute, or a bad argument to a builtin or macro."""

    code = "EVAL_ERROR"


class ResolutionError(TemplateError):
    """A resource reference that is not present in the render context."""

    code = "RESOLUTION_ERROR"

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"unknown resource handle: {ref}")


class NoSuchMacroError(TemplateError):
    """No macro with the requested name exists for the active dialect."""

    code = "NO_SUCH_MACRO"

    def __init__(self, dialect: str, macro_name: str) -> None:
        self.dialect = dialect
        self.macro_name = macro_name
        super().__init__(f"adapter {dialect} cannot dispatch macro {macro_name}")
