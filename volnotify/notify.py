# volnotify/notify.py
#
# notify-send invocation. `-p` makes notify-send print the id the server
# assigned; `-r <id>` asks the server to replace that notification in place.

import re

from .compat import NOTIFICATION_TITLE
from .runner import run_or_die

_ID_RE = re.compile(r"[0-9]+")


class NotificationParseError(ValueError):
    """notify-send did not print a bare notification id."""


def format_body(mute_text, channels):
    """Mute line first, then one "- <channel>" line per channel."""
    lines = [mute_text]
    lines.extend(f"- {c}" for c in channels)
    return "\n".join(lines)


def build_command(notify_send, mute_text, channels, icon, replace_id=None):
    argv = [
        notify_send,
        NOTIFICATION_TITLE,
        format_body(mute_text, channels),
        "-p",
        "-i", icon,
    ]
    if replace_id is not None:
        argv.extend(["-r", str(replace_id)])
    return argv


def parse_id(text):
    text = (text or "").strip()
    if not _ID_RE.fullmatch(text):
        raise NotificationParseError(f"failed to parse notification id from {text!r}")
    return int(text)


def send(notify_send, mute_text, channels, icon, replace_id=None):
    """Show (or replace) the notification and return its id."""
    out = run_or_die(build_command(notify_send, mute_text, channels, icon, replace_id))
    return parse_id(out)
