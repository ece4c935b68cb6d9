"""Main interactive event loop for the review screen.

Each iteration: track terminal size, apply finished fetches, fire the refresh
timer, redraw when dirty, then wait briefly for one key.
Feature logic lives in ``AppController``; this module is wiring only.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Sequence

from ..input import read_key
from ..render import write_frame
from .app import AppController
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_MS = 120


def run_main_loop(
    controller: AppController,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size,
    read: Callable[..., str] = read_key,
    write: Callable[[Sequence[str]], None] = write_frame,
    key_poll_ms: int = KEY_POLL_MS,
) -> None:
    """Run until a quit key arrives. Terminal state is restored on any exit."""
    with terminal.raw_mode():
        while True:
            term = get_terminal_size((80, 24))
            controller.resize(term.columns, term.lines)
            controller.poll_results()
            controller.tick()

            if controller.dirty:
                write(controller.render_frame())
                controller.dirty = False

            try:
                key = read(stdin_fd, timeout_ms=key_poll_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if controller.handle_key(key):
                logger.debug("quit on %s", key)
                return


__all__ = ["KEY_POLL_MS", "run_main_loop"]
