"""
Shared logging helpers.
"""
import logging
from typing import Union


def configure_logging(*, level: Union[int, str] = logging.INFO, force: bool = False) -> None:
    """
    Initialise the root logger with a terse format suitable for CLI and server output.

    Args:
        level: Logging level (name or number)
        force: Reconfigure even if handlers are already installed (tests, CLI)
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
