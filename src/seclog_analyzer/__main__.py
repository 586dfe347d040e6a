"""Module entrypoint.

Allows:
    python -m seclog_analyzer
"""

from __future__ import annotations

from seclog_analyzer.server.log_server import main

if __name__ == "__main__":
    main()
