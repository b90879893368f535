# volnotify/cmdline_fmt.py
#
# Small utility for formatting argv lists into a human-friendly command string.
#
# IMPORTANT:
# - This is for display/logging only.
# - Do NOT use this to execute subprocesses (always pass argv as a list).
#
# The notification body contains newlines, so the display form escapes them to
# keep each logged command on one line.
#
import shlex


def format_cmd_for_display(argv) -> str:
    """
    Format an argv list into a single-line command string suitable for
    display/logging.

    Args:
      argv: Iterable of arguments (typically a list[str]).

    Returns:
      A shell-quoted string, with embedded newlines shown as "\\n".
    """
    if argv is None:
        return ""

    # Normalize to strings; None becomes an empty argument.
    args = ["" if a is None else str(a) for a in argv]
    return shlex.join(args).replace("\n", "\\n")


def format_volnotify_cmd_for_display(args) -> str:
    """
    Format a `volnotify ...` command line for humans to copy/paste, e.g. when
    suggesting a key binding in an error message.
    """
    return "volnotify " + format_cmd_for_display(args) if args else "volnotify"
