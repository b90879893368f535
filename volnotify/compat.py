# volnotify/compat.py
"""
Platform defaults and fixed names shared by the CLI and the helpers.

Nothing in here touches the filesystem at import time; paths are resolved on
demand so tests (and callers with a custom environment) see their own values.
"""
import os

# External tools. Overridable through the environment so a different
# pactl-compatible binary (or a test double) can be dropped in.
ENV_PACTL = "VOLNOTIFY_PACTL"
ENV_NOTIFY_SEND = "VOLNOTIFY_NOTIFY_SEND"
ENV_DB = "VOLNOTIFY_DB"
ENV_DEBUG = "VOLNOTIFY_DEBUG"
ENV_LOG_DIR = "VOLNOTIFY_LOG_DIR"

DEFAULT_PACTL = "pactl"
DEFAULT_NOTIFY_SEND = "notify-send"
NOOP_COMMAND = "true"

DEFAULT_SINK = "@DEFAULT_SINK@"
DEFAULT_INTERVAL = 512

RECORD_NAME = "volume.id"
NOTIFICATION_TITLE = "Volume"

# pactl prints exactly this when the sink is muted.
MUTED_TEXT = "Mute: yes"

# Freedesktop icon names used for the notification.
ICON_MUTED = "audio-volume-muted"
ICON_LOW = "audio-volume-low"
ICON_MEDIUM = "audio-volume-medium"
ICON_HIGH = "audio-volume-high"

TASKS = ("up", "down", "mute", "noop")


def pactl_tool():
    return os.environ.get(ENV_PACTL) or DEFAULT_PACTL


def notify_send_tool():
    return os.environ.get(ENV_NOTIFY_SEND) or DEFAULT_NOTIFY_SEND


def runtime_dir():
    """
    Per-user transient directory. Prefers XDG_RUNTIME_DIR and falls back to the
    systemd-logind layout (/run/user/<uid>), which is wiped at session end.
    """
    xdg = os.environ.get("XDG_RUNTIME_DIR")
    if xdg:
        return xdg
    return os.path.join("/run/user", str(os.getuid()))


def default_record_path():
    env = os.environ.get(ENV_DB)
    if env:
        return env
    return os.path.join(runtime_dir(), RECORD_NAME)
