import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from config import settings

_configured = False


def configure_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Install a Rich handler on the root logger (once per process)."""
    global _configured
    resolved = (level or settings.log_level or "INFO").upper()
    if not isinstance(logging.getLevelName(resolved), int):
        raise ValueError(f"Unknown log level: {level or settings.log_level}")
    root = logging.getLogger()
    root.setLevel(resolved)
    if _configured:
        return
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=settings.debug,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    _configured = True
