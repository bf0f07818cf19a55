"""
project: Delver
module: server.py
License: MIT

Server bootstrap for the level generation API.

Builds the Flask app, points stdlib logging (Flask and werkzeug request logs)
at a rotating ``app.log`` in the instance folder plus the console, and runs
the development server. Generator events keep using ``delver.logging_utils``.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from delver import create_app
from delver.logging_utils import get_logger

log = get_logger("delver.server")

# DELVER_LOG_LEVEL names mapped onto stdlib levels
_STDLIB_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Create the app and serve levels until interrupted."""
    app = create_app()
    log_path = _configure_logging(app)
    log.info(event="server_start", host=host, port=port, debug=debug, log_file=log_path)
    try:
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(app):
    """Install file + console handlers on the root logger and return the log path.

    Existing root handlers are replaced so calling this twice does not double
    every line. The file rotates at ~1 MB keeping three backups.
    """
    level = _STDLIB_LEVELS.get(os.getenv("DELVER_LOG_LEVEL", "info").lower(), logging.INFO)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(app.instance_path, "app.log")
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [
        RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3),
        logging.StreamHandler(),
    ]
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)
        root.addHandler(h)
    root.setLevel(level)
    return log_path
