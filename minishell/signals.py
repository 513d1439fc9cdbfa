"""Signal dispositions for the interactive shell."""

from __future__ import annotations

import signal
import sys
from typing import Any


def sigint_handler(signum: int, frame: Any) -> None:
    """On Ctrl-C, move to a fresh line instead of terminating."""
    sys.stdout.write("\n")
    sys.stdout.flush()


def setup_signals() -> None:
    """Catch SIGINT and ignore SIGQUIT and SIGPIPE."""
    signal.signal(signal.SIGINT, sigint_handler)
    for name in ("SIGQUIT", "SIGPIPE"):
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, signal.SIG_IGN)


def ignore_sigint() -> Any:
    """Ignore SIGINT (while waiting for children); return the previous handler."""
    return signal.signal(signal.SIGINT, signal.SIG_IGN)


def restore_sigint() -> Any:
    """Reinstall the shell's SIGINT handler; return the previous handler."""
    return signal.signal(signal.SIGINT, sigint_handler)