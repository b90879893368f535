# volnotify/sink.py
#
# Everything that knows about pactl's grammar lives here:
# - building the argv for the requested action and for the two state queries
# - parsing `pactl get-sink-volume` output into per-channel descriptors
# - picking the notification icon from the mute line and the average level
#
# pactl's textual output is treated as a fixed contract. A typical volume
# report looks like:
#
#   Volume: front-left: 32768 /  50% / -18.06 dB,   front-right: 32768 /  50% / -18.06 dB
#           balance 0.00
#
# and the mute query prints either "Mute: yes" or "Mute: no".

import re
from collections import namedtuple

from .compat import (
    TASKS, NOOP_COMMAND, MUTED_TEXT,
    ICON_MUTED, ICON_LOW, ICON_MEDIUM, ICON_HIGH,
)


class UsageError(ValueError):
    """The requested task or interval is not usable."""


class VolumeParseError(ValueError):
    """The volume report did not contain a single recognisable channel."""


# A channel descriptor: a label (one or more words, no colon/comma), a raw
# volume, the percentage (pactl right-aligns it, hence the optional padding)
# and the dB value.
_CHANNEL_RE = re.compile(
    r"(?:[^\s:,]+ )*[^\s:,]+: [0-9]+ / \s*([0-9]+)% / -?[0-9.]+ dB"
)


class SinkAction(namedtuple("SinkAction", ["task", "sink", "step"])):
    """
    One requested change to a sink, built once from user input.

    task: one of TASKS
    sink: pactl sink name (e.g. "@DEFAULT_SINK@")
    step: raw pactl volume units for up/down (non-negative)
    """
    __slots__ = ()

    def command(self, pactl):
        """
        Return the argv that performs this action.

        "noop" still runs a (harmless) command so every invocation goes through
        the same code path.
        """
        if self.task == "up":
            return [pactl, "set-sink-volume", self.sink, f"+{self.step}"]
        if self.task == "down":
            return [pactl, "set-sink-volume", self.sink, f"-{self.step}"]
        if self.task == "mute":
            return [pactl, "set-sink-mute", self.sink, "toggle"]
        if self.task == "noop":
            return [NOOP_COMMAND]
        raise UsageError(f"Unknown task {self.task}")


def make_action(task, sink, step):
    """Validate user input and build a SinkAction."""
    if task not in TASKS:
        raise UsageError(f"Unknown task {task}")
    step = int(step)
    if step < 0:
        raise UsageError(f"Interval must be non-negative, got {step}")
    return SinkAction(task, sink, step)


def mute_query(pactl, sink):
    return [pactl, "get-sink-mute", sink]


def volume_query(pactl, sink):
    return [pactl, "get-sink-volume", sink]


def parse_volume(text):
    """
    Extract every channel from a `get-sink-volume` report.

    Returns (percent, channels): the integer-truncated mean of the channel
    percentages and the matched descriptors in report order.

    Raises VolumeParseError when no channel matches; there is no meaningful
    average in that case.
    """
    channels = []
    total = 0
    for m in _CHANNEL_RE.finditer(text or ""):
        channels.append(m.group(0))
        total += int(m.group(1))

    if not channels:
        raise VolumeParseError(f"no channel volume found in pactl output: {text!r}")

    return total // len(channels), channels


def is_muted(mute_text):
    return mute_text == MUTED_TEXT


def get_icon(mute_text, percent):
    # Breakpoints: 0 muted, 1-32 low, 33-65 medium, 66+ high.
    if is_muted(mute_text):
        return ICON_MUTED
    if percent <= 0:
        return ICON_MUTED
    if percent < 33:
        return ICON_LOW
    if percent < 66:
        return ICON_MEDIUM
    return ICON_HIGH
