"""
Language server entry point for varsu.

Usage:
    python -m varsu.lsp_server

Environment Variables:
    VARSU_LOG_LEVEL: Log level (default: INFO)
    VARSU_FETCH_TIMEOUT: Seconds per stylesheet download attempt (default: 5)
    VARSU_FETCH_ATTEMPTS: Download attempts per stylesheet (default: 3)
    VARSU_URI_MAPPING_LIFETIME: Seconds a closed document stays mapped (default: 1800)
"""

import sys

from varsu.lsp_server.server import start


if __name__ == "__main__":
    try:
        start()
    except KeyboardInterrupt:
        sys.exit(0)
