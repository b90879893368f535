# volnotify/__init__.py

__version__ = "0.1.0"

# Package-level entrypoint export, so the CLI can be invoked programmatically
# (tests, other tools) without going through the module-as-script path.
from .cli import main

__all__ = ["main", "__version__"]
