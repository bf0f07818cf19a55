"""
project: Delver
module: __init__.py
License: MIT

Flask application factory for the level generation API.

The generator itself lives in ``delver.dungeon`` and has no web dependency at
runtime; this module only wires the JSON blueprint that hands levels to game
clients. Configuration is sourced from environment variables (optionally via
a ``.env`` file) with development defaults. A local ``instance/`` directory
holds the rotating log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so DELVER_* generation defaults can be supplied
# without exporting shell variables during development.
load_dotenv()


def create_app(test_config=None):
    """Build and return a configured Flask app with the dungeon blueprint."""
    app = Flask(__name__, instance_relative_config=True)

    # Ensure instance directory exists for the log file
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only installs can still serve requests without a log file
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        DELVER_DISABLE_CACHE=os.getenv("DELVER_DISABLE_CACHE", "0") in ("1", "true", "yes"),
        DELVER_CACHE_MAX=int(os.getenv("DELVER_CACHE_MAX", "8")),
        DELVER_DEBUG_CHECKS=os.getenv("DELVER_DEBUG_CHECKS", "0") in ("1", "true", "yes"),
        DELVER_MAX_DIM=int(os.getenv("DELVER_MAX_DIM", "256")),
    )
    if test_config:
        app.config.update(test_config)

    from delver.routes.dungeon_api import bp_dungeon

    app.register_blueprint(bp_dungeon)

    # Error handling: log details with a short id the client can report back
    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal server error", "error_id": error_id}), 500

    return app
