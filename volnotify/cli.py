# volnotify/cli.py
import sys
import argparse

from . import __version__
from .compat import (
    TASKS, DEFAULT_SINK, DEFAULT_INTERVAL,
    default_record_path, pactl_tool, notify_send_tool,
)
from .cmdline_fmt import format_volnotify_cmd_for_display
from .logging_setup import _log, _log_exc, _dbg, set_debug
from .runner import run_or_die, CommandError
from .sink import (
    make_action, mute_query, volume_query, parse_volume, get_icon,
    UsageError, VolumeParseError,
)
from .notify import send as send_notification, NotificationParseError
from .idstore import open_record, exchange_identity, RecordCorruptError

# Exit codes (documented in --help epilog).
EXIT_OK = 0
EXIT_COMMAND = 1
EXIT_USAGE = 2
EXIT_PARSE = 3
EXIT_RECORD = 4
EXIT_INTERRUPTED = 130


def apply_and_notify(action, db_path, pactl=None, notify_send=None):
    """
    Apply `action`, read back the sink state and show/replace the volume
    notification.

    Returns (old_id, new_id). old_id is None on the first notification for this
    record, in which case new_id has been stored in the record.
    """
    pactl = pactl or pactl_tool()
    notify_send = notify_send or notify_send_tool()

    run_or_die(action.command(pactl))

    mute = run_or_die(mute_query(pactl, action.sink))
    volume = run_or_die(volume_query(pactl, action.sink))
    percent, channels = parse_volume(volume)
    icon = get_icon(mute, percent)
    _dbg(f"state: {mute!r} percent={percent} channels={len(channels)} icon={icon}")

    def _send(old_id):
        return send_notification(notify_send, mute, channels, icon, replace_id=old_id)

    with open_record(db_path) as record:
        old_id, new_id = exchange_identity(record, _send)

    _dbg(f"notification: old_id={old_id} new_id={new_id}")
    return old_id, new_id


def cmd_run(args):
    action = make_action(args.task, args.sink, args.interval)
    apply_and_notify(action, args.db_path)
    return EXIT_OK


def build_parser():
    p = argparse.ArgumentParser(
        prog="volnotify",
        description="Change the volume of a PulseAudio/PipeWire sink and show a notification.",
        epilog="exit codes: 0 ok, 1 command failed, 2 usage, 3 unparseable output, "
               "4 notification record error, 130 interrupted",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-p", "--db-path", default=None,
                   help="Path to the notification id record (default: $VOLNOTIFY_DB or "
                        "$XDG_RUNTIME_DIR/volume.id)")
    p.add_argument("-i", "--interval", type=int, default=DEFAULT_INTERVAL,
                   help=f"Raw pactl volume units to add/remove (default: {DEFAULT_INTERVAL})")
    p.add_argument("-s", "--sink", default=DEFAULT_SINK,
                   help=f"Sink on which to perform the action (default: {DEFAULT_SINK})")
    p.add_argument("--debug", action="store_true",
                   help="Write step-by-step debug lines to the log file")
    p.add_argument("task", nargs="?", default="noop", choices=TASKS,
                   help="Action to perform (default: noop)")
    p.set_defaults(func=cmd_run)
    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.interval < 0:
        parser.error(f"argument -i/--interval: must be non-negative, got {args.interval}")
    if args.db_path is None:
        args.db_path = default_record_path()
    if args.debug:
        set_debug(True)

    _dbg("invoked as: " + format_volnotify_cmd_for_display(
        sys.argv[1:] if argv is None else argv))

    try:
        return args.func(args)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    except UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    except CommandError as e:
        _log_exc("command failed")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_COMMAND
    except (VolumeParseError, NotificationParseError) as e:
        _log_exc("unparseable output")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_PARSE
    except RecordCorruptError as e:
        _log_exc("corrupt record")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_RECORD
    except OSError as e:
        _log_exc("record I/O failed")
        _log(f"record path: {args.db_path}")
        print(f"ERROR: notification record {args.db_path}: {e}", file=sys.stderr)
        return EXIT_RECORD
