"""Module entrypoint.

Allows:
    python -m tracemind
"""

from __future__ import annotations

from tracemind.server.trace_server import main

if __name__ == "__main__":
    main()
