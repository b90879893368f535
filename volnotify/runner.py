# volnotify/runner.py
#
# Single-shot subprocess execution for pactl / notify-send.
#
# Contract:
# - argv is always passed as a list (never through a shell).
# - stderr is inherited, so the child's own diagnostics reach the user as-is.
# - stdout is captured completely, decoded as UTF-8 and trimmed.
# - Any failure (cannot start, non-zero exit, undecodable output) raises
#   CommandError. There is no retry and no timeout: the tool is re-run by the
#   next key press anyway.

import subprocess

from .cmdline_fmt import format_cmd_for_display
from .logging_setup import _dbg


class CommandError(RuntimeError):
    """An external command could not be run or did not succeed."""

    def __init__(self, argv, reason, returncode=None):
        self.argv = list(argv)
        self.reason = reason
        self.returncode = returncode
        super().__init__(f"{reason}: {format_cmd_for_display(self.argv)}")


def run_or_die(argv) -> str:
    """
    Run argv to completion and return its trimmed stdout.

    Raises CommandError on launch failure, non-zero exit status or output that
    is not valid UTF-8.
    """
    argv = [str(a) for a in argv]
    if not argv:
        raise CommandError(argv, "empty command")

    _dbg(f"run: {format_cmd_for_display(argv)}")
    try:
        proc = subprocess.run(argv, stdout=subprocess.PIPE, stderr=None, check=False)
    except OSError as e:
        raise CommandError(argv, f"failed to execute ({e.strerror or e})") from e

    if proc.returncode != 0:
        raise CommandError(argv, f"command exited with status {proc.returncode}", proc.returncode)

    try:
        out = proc.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CommandError(argv, "failed to decode output") from e

    out = out.strip()
    _dbg(f"  -> {out!r}")
    return out
