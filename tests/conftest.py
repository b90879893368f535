"""Shared fixtures."""

import pytest

from volnotify import logging_setup


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    """Keep the log file (and debug state) inside the test's tmp dir."""
    log_dir = tmp_path / "log"
    log_dir.mkdir()
    monkeypatch.setattr(logging_setup, "_LOG_DIR", str(log_dir))
    monkeypatch.setattr(logging_setup, "_LOG_PATH", str(log_dir / logging_setup.LOG_NAME))
    monkeypatch.setattr(logging_setup, "_INITIALIZED", True)
    monkeypatch.setattr(logging_setup, "_DEBUG", False)
    for name in ("VOLNOTIFY_DB", "VOLNOTIFY_PACTL", "VOLNOTIFY_NOTIFY_SEND", "VOLNOTIFY_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    return log_dir


class FakeAudio:
    """
    Stands in for pactl + notify-send at the run_or_die seam.

    Volume is tracked in raw pactl units per channel (65536 == 100%), the
    notification server hands out increasing ids.
    """

    def __init__(self, channels=2, raw=32768, muted=False, next_id=7):
        self.raw = [raw] * channels
        self.muted = muted
        self.next_id = next_id
        self.calls = []

    def percent(self):
        return [round(r * 100 / 65536) for r in self.raw]

    def volume_report(self):
        names = ["front-left", "front-right", "rear-left", "rear-right"]
        parts = [
            f"{names[i]}: {r} / {p:3d}% / -18.06 dB"
            for i, (r, p) in enumerate(zip(self.raw, self.percent()))
        ]
        return "Volume: " + ",   ".join(parts) + "\n        balance 0.00"

    def __call__(self, argv):
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        tool, rest = argv[0], argv[1:]
        if tool == "true":
            return ""
        if tool == "pactl":
            verb = rest[0]
            if verb == "set-sink-volume":
                delta = int(rest[2])
                self.raw = [max(0, r + delta) for r in self.raw]
                return ""
            if verb == "set-sink-mute":
                self.muted = not self.muted
                return ""
            if verb == "get-sink-mute":
                return "Mute: yes" if self.muted else "Mute: no"
            if verb == "get-sink-volume":
                return self.volume_report()
        if tool == "notify-send":
            if "-r" in rest:
                return rest[rest.index("-r") + 1]
            ident = self.next_id
            self.next_id += 1
            return str(ident)
        raise AssertionError(f"unexpected command {argv}")

    def notify_calls(self):
        return [c for c in self.calls if c[0] == "notify-send"]


@pytest.fixture
def fake_audio(monkeypatch):
    fake = FakeAudio()
    monkeypatch.setattr("volnotify.cli.run_or_die", fake)
    monkeypatch.setattr("volnotify.notify.run_or_die", fake)
    return fake
