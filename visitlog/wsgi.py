"""WSGI entrypoint for visitlog."""

from __future__ import annotations

import logging
import os

from visitlog import create_app

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()

if __name__ == "__main__":
    host = os.environ.get("FLASK_RUN_HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "3000"))
    app.run(host=host, port=port, threaded=True)  # nosec B104
