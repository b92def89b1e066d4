import logging
import sys
from rich import print
from rich.logging import RichHandler


def exit_with_error(message, code=1):
    print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(code)


def init_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
