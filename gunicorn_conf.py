import os
import sys
import traceback

# Ensure the src directory is on sys.path so "import rentcar" works
ROOT = os.path.abspath(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from rentcar import create_app
from rentcar.config.config import Config

wsgi_app = "main:app"
chdir = SRC
bind = f"{Config.FLASK_HOST}:{Config.FLASK_PORT}"


def when_ready(server):
    """
    Gunicorn hook executed in the master process when the server is ready.
    Checks the environment once here, not in every worker.
    """
    try:
        Config.validate_required()
    except RuntimeError as e:
        server.log.warning(str(e))
    try:
        app = create_app()
        server.log.info("Backend ready: %s" % type(app.db).__name__)
    except Exception:
        server.log.error("Failed to build app in master process:\n" + traceback.format_exc())
