# volnotify/logging_setup.py
import os
import sys
import traceback
import datetime
import tempfile

try:
    import faulthandler
except Exception:
    faulthandler = None

from .compat import ENV_DEBUG, ENV_LOG_DIR

LOG_NAME = "volnotify.log"

_TRUTHY = ("1", "true", "yes", "on")

def _env_flag(value):
    return (value or "").strip().lower() in _TRUTHY

# Debug toggle (runtime)
_DEBUG = _env_flag(os.environ.get(ENV_DEBUG))

# Internal state (lazy init: no file I/O at import time)
_LOG_DIR = None
_LOG_PATH = None
_INITIALIZED = False
_FH = None            # faulthandler file handle
_HOOKS_INSTALLED = False

def set_debug(on: bool = True):
    global _DEBUG
    _DEBUG = bool(on)
    if _DEBUG:
        _dbg("DEBUG enabled")

def _resolve_log_dir():
    """
    Decide where the log would live, but do not create it yet.

    Order: $VOLNOTIFY_LOG_DIR, $XDG_RUNTIME_DIR/volnotify, <tempdir>/volnotify.
    The runtime dir is preferred because it is per-user and cleared at logout,
    matching the lifetime of the notification record.
    """
    env = os.environ.get(ENV_LOG_DIR)
    if env:
        return env
    xdg = os.environ.get("XDG_RUNTIME_DIR")
    if xdg:
        return os.path.join(xdg, "volnotify")
    return os.path.join(tempfile.gettempdir(), "volnotify")

def _ensure_resolved():
    """
    Resolve path variables, but do not touch the filesystem.
    """
    global _LOG_DIR, _LOG_PATH
    if _LOG_DIR is None or _LOG_PATH is None:
        _LOG_DIR = _resolve_log_dir()
        _LOG_PATH = os.path.join(_LOG_DIR, LOG_NAME)

def _global_excepthook(exc_type, exc_value, exc_tb):
    _log_exc("UNCAUGHT EXCEPTION", (exc_type, exc_value, exc_tb))
    sys.__excepthook__(exc_type, exc_value, exc_tb)

def _install_hooks_once():
    """
    Install the uncaught-exception hook (idempotent). No file I/O here.
    """
    global _HOOKS_INSTALLED
    if _HOOKS_INSTALLED:
        return
    sys.excepthook = _global_excepthook
    _HOOKS_INSTALLED = True

def _atexit_close_handles():
    global _FH
    if faulthandler and _FH and not _FH.closed:
        faulthandler.disable()
        _FH.flush()
        _FH.close()
        _FH = None

def _ensure_init():
    """
    Initialize logging on first use (lazy):
    - Resolve and create the log directory
    - Install the exception hook
    - Enable faulthandler into the log file (if available)
    - Register the atexit handler that closes it again

    If the directory cannot be created, file logging stays disabled for the
    rest of the process.
    """
    global _INITIALIZED, _FH
    if _INITIALIZED:
        return
    _INITIALIZED = True

    _ensure_resolved()
    try:
        os.makedirs(_LOG_DIR, mode=0o700, exist_ok=True)
    except OSError:
        return

    _install_hooks_once()

    if faulthandler and _FH is None:
        try:
            _FH = open(_LOG_PATH, "a", buffering=1, encoding="utf-8")
            faulthandler.enable(file=_FH)
        except OSError:
            _FH = None
        else:
            import atexit
            atexit.register(_atexit_close_handles)

def _write(line: str):
    _ensure_init()       # creates the directory on first use
    try:
        with open(_LOG_PATH, "a", encoding="utf-8", errors="replace") as f:
            f.write(line + "\n")
    except OSError:
        pass

def _stamp():
    return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

def _log(msg: str):
    _write(f"[{_stamp()}] [pid={os.getpid()}] {msg}")

def _log_exc(prefix: str, exc_info=None):
    if exc_info is None:
        exc_info = sys.exc_info()
    tb = "".join(traceback.format_exception(*exc_info))
    _log(f"{prefix}\n{tb}".rstrip())

def _dbg(msg: str):
    if not _DEBUG:
        return
    _write(f"[{_stamp()}] [DBG pid={os.getpid()}] {msg}")
