"""Module entrypoint.

Allows:
    python -m fluentbit_log_config
"""

from __future__ import annotations

from fluentbit_log_config.server.config_server import main

if __name__ == "__main__":
    main()
