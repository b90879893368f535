# volnotify/__main__.py
# Makes `python -m volnotify` behave like the installed `volnotify` script.

from .cli import main

if __name__ == "__main__":
    import sys
    # main() returns the documented exit code; propagate it for key bindings
    # and scripts that check it.
    sys.exit(main())
