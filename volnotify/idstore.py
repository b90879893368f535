# volnotify/idstore.py
#
# Notification-identity record: a tiny file holding the id of the notification
# this tool last created, so later invocations replace it instead of stacking a
# new one.
#
# Record contents are either empty (no identity yet) or the decimal digits of a
# single non-negative integer. Nothing else.
#
# Locking protocol (advisory flock(2) on the record itself):
#
#   open_record()         open/create the file, take LOCK_SH for the whole block
#   exchange_identity()
#     read under LOCK_SH  -> id present: use it, no escalation, never write
#     record empty        -> LOCK_EX on the same descriptor, read again
#                            (another process may have won in between)
#     send(old_id)        -> notification is shown while the lock is held
#     still empty         -> truncate + write the new id, still under LOCK_EX
#
# The lock only ever moves shared -> exclusive, never the other way. flock
# conversion on Linux drops the shared lock before granting the exclusive one,
# so two processes escalating at the same time cannot deadlock; the re-read
# under LOCK_EX is what makes the gap harmless. Among all processes that find
# the record empty, exactly one writes; the others block on LOCK_EX, then see
# the winner's id and replace that notification.
#
# Both locks are released when the open_record() block exits (or when the
# process dies, since the kernel drops flock locks with the descriptor).

import os
import re
import fcntl
from contextlib import contextmanager

from .logging_setup import _dbg

_ID_RE = re.compile(r"[0-9]+")


class RecordCorruptError(ValueError):
    """The record holds something other than empty text or a plain integer."""

    def __init__(self, path, content):
        self.path = path
        self.content = content
        super().__init__(f"failed to parse notification record {path}: {content!r}")


def _private_opener(path, flags):
    return os.open(path, flags, 0o600)


@contextmanager
def open_record(path):
    """
    Open (creating if absent) the record for reading and writing and hold a
    shared advisory lock on it for the duration of the block.

    Yields the open text file object. OSError from open/flock propagates.
    """
    # "a+" creates the file if needed (owner-only) and allows reading; writes
    # land at the end, which after truncate(0) is offset 0.
    f = open(path, "a+", encoding="ascii", newline="", opener=_private_opener)
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        _dbg(f"record {path}: LOCK_SH")
        yield f
    finally:
        # Closing the descriptor releases the lock as well; unlock explicitly
        # so the release does not depend on other references to the file.
        try:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        finally:
            f.close()


def _read_record(f):
    """Return the stored id or None for an empty record."""
    f.seek(0)
    try:
        content = f.read()
    except UnicodeDecodeError as e:
        raise RecordCorruptError(f.name, "<undecodable bytes>") from e

    text = content.strip()
    if not text:
        return None
    if not _ID_RE.fullmatch(text):
        raise RecordCorruptError(f.name, content)
    return int(text)


def _write_record(f, ident):
    f.seek(0)
    f.truncate(0)
    f.write(str(int(ident)))
    f.flush()
    os.fsync(f.fileno())


def _read_escalating(f):
    """
    Read under the shared lock; only when the record is empty escalate to an
    exclusive lock and read again.

    Returns (ident, exclusive) where exclusive tells whether LOCK_EX is held.
    """
    ident = _read_record(f)
    if ident is not None:
        _dbg(f"record {f.name}: id={ident} (shared)")
        return ident, False

    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
    ident = _read_record(f)
    _dbg(f"record {f.name}: LOCK_EX, id={ident}")
    return ident, True


def _write_once(f, old_ident, exclusive, new_ident):
    if old_ident is not None:
        raise RuntimeError("notification id already recorded; refusing to overwrite")
    if not exclusive:
        raise RuntimeError("record write attempted without the exclusive lock")
    _write_record(f, new_ident)
    _dbg(f"record {f.name}: wrote id={new_ident}")


def exchange_identity(record, send):
    """
    Run the read / escalate / send / write-once sequence on an open record.

    record: file object yielded by open_record()
    send:   callable(old_id) -> new_id; receives None when no notification is
            tracked yet, otherwise the id to replace. Called exactly once,
            while the appropriate lock is held.

    Returns (old_id, new_id). The record is written only when old_id is None.
    """
    old_ident, exclusive = _read_escalating(record)
    new_ident = send(old_ident)
    if old_ident is None:
        _write_once(record, old_ident, exclusive, new_ident)
    return old_ident, new_ident

