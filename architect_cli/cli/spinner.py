"""
Progress Spinner.

Shows a Rich status spinner on stderr while a request is in flight.
Purely cosmetic: the wrapped operation's result and errors pass through
unchanged.
"""

from typing import Awaitable, Callable, TypeVar

from rich.text import Text

from architect_cli.cli.output import err_console

T = TypeVar("T")


async def with_spinner(text: str, operation: Callable[[], Awaitable[T]]) -> T:
    """
    Run an async operation behind a spinner.

    Args:
        text: Label shown next to the spinner.
        operation: Zero-argument callable returning the awaitable to run.

    Returns:
        Whatever the operation returns.

    Raises:
        Whatever the operation raises, after marking the spinner failed.
    """
    status = err_console.status(Text(text), spinner="dots")
    status.start()
    try:
        result = await operation()
    except BaseException:
        status.stop()
        err_console.print(Text.assemble(("✗", "red"), " ", (text, "dim")), soft_wrap=True)
        raise
    status.stop()
    return result
