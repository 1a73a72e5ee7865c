"""Interactive terminal loop."""

from collections.abc import Callable

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.theme import Theme

from .logging import get_logger
from .session import GameSession

logger = get_logger(__name__)

THEME = Theme(
    {
        "info": "bold #b0d8e3",
        "dim": "dim",
    }
)


def _prompt(console: Console) -> str:
    return Prompt.ask("[info]>[/info]", console=console)


def run(
    session: GameSession,
    console: Console | None = None,
    input_fn: Callable[[], str] | None = None,
) -> None:
    """Read commands until end of input or the player quits."""
    console = console or Console(theme=THEME)
    read = input_fn or (lambda: _prompt(console))

    if session.world.title:
        console.print(Panel(session.world.title, border_style="info"))
    console.print(session.opening(), markup=False, highlight=False)

    while not session.is_over:
        try:
            line = read().strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not line:
            continue
        response = session.process(line)
        if response:
            console.print(response, markup=False, highlight=False)
        console.print()

    logger.info(
        "session_ended",
        moves=session.state.moves,
        score=session.state.score,
        won=session.state.won,
    )
