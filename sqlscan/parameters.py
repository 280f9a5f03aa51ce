"""Statement rendering.

A statement is written as a sequence of literal SQL fragments and bound
arguments::

    scan.query_all(
        "main",
        "SELECT id, name FROM users WHERE active = 1",
        with_arg(" AND id = ", user_id),
        [with_arg(" AND name = ", name or ""), with_arg(" AND role = ", role)],
    )

Literal strings are copied verbatim. Each bound argument contributes its SQL
fragment followed by a driver-specific placeholder, and its value is appended
to the parameter list. A bound argument whose fragment is empty contributes
nothing, which makes it easy to drop optional clauses.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Final, NamedTuple, Union

from sqlscan.exceptions import ParameterError

__all__ = (
    "Arg",
    "ParameterStyle",
    "RenderedStatement",
    "StatementRenderer",
    "placeholder_style_for",
    "render_placeholder",
    "render_statement",
    "with_arg",
)


class ParameterStyle(str, Enum):
    """Placeholder syntax understood by a driver family."""

    QMARK = "qmark"
    NUMERIC_COLON = "numeric_colon"
    NUMERIC_DOLLAR = "numeric_dollar"

    def __str__(self) -> str:
        return self.value


class Arg(NamedTuple):
    """A SQL fragment followed by one bound value."""

    sql: str
    value: Any


class RenderedStatement(NamedTuple):
    """Driver-ready SQL text paired with its ordered parameter values."""

    sql: str
    parameters: "tuple[Any, ...]"


StatementRenderer = Callable[[Iterable[Any]], RenderedStatement]

_DRIVER_STYLES: Final[dict[str, ParameterStyle]] = {
    "oracle": ParameterStyle.NUMERIC_COLON,
    "oracledb": ParameterStyle.NUMERIC_COLON,
    "postgres": ParameterStyle.NUMERIC_DOLLAR,
    "postgresql": ParameterStyle.NUMERIC_DOLLAR,
    "psycopg": ParameterStyle.NUMERIC_DOLLAR,
}


def with_arg(sql: str, value: Any) -> Arg:
    """Bind ``value`` to a placeholder that follows ``sql``.

    Args:
        sql: SQL fragment emitted before the placeholder. Empty omits the argument.
        value: Value sent to the driver.

    Returns:
        The bound argument.
    """
    return Arg(sql, value)


def placeholder_style_for(driver: str) -> ParameterStyle:
    """Return the placeholder syntax used for a driver identifier.

    Unknown identifiers use ``?`` placeholders.
    """
    return _DRIVER_STYLES.get(driver.lower(), ParameterStyle.QMARK)


def render_placeholder(style: ParameterStyle, index: int) -> str:
    """Render the placeholder for the ``index``-th (1-based) bound argument.

    The trailing space keeps the placeholder from merging with the next fragment.
    """
    if style is ParameterStyle.NUMERIC_COLON:
        return f":{index} "
    if style is ParameterStyle.NUMERIC_DOLLAR:
        return f"${index} "
    return "? "


def render_statement(driver: "Union[str, ParameterStyle]", args: Iterable[Any]) -> RenderedStatement:
    """Render statement arguments into SQL text and ordered parameters.

    Args:
        driver: Driver identifier or explicit placeholder style.
        args: Literal strings, :class:`Arg` values, or lists/tuples of :class:`Arg`.

    Raises:
        ParameterError: If an argument has any other type.

    Returns:
        The rendered statement.
    """
    style = driver if isinstance(driver, ParameterStyle) else placeholder_style_for(driver)
    fragments: list[str] = []
    parameters: list[Any] = []

    def bind(arg: Arg) -> None:
        if not arg.sql:
            return
        fragments.append(arg.sql + render_placeholder(style, len(parameters) + 1))
        parameters.append(arg.value)

    for arg in args:
        if isinstance(arg, Arg):
            bind(arg)
        elif isinstance(arg, str):
            fragments.append(arg)
        elif isinstance(arg, (list, tuple)):
            for item in arg:
                if not isinstance(item, Arg):
                    msg = f"Invalid arg type in clause list: {type(item).__name__}, expecting Arg"
                    raise ParameterError(msg, sql="".join(fragments))
                bind(item)
        else:
            msg = f"Invalid arg type: {type(arg).__name__}, expecting Arg, list of Arg or str"
            raise ParameterError(msg, sql="".join(fragments))

    return RenderedStatement("".join(fragments), tuple(parameters))
