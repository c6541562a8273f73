"""
Gunicorn configuration for visitlog.
All configuration driven from environment variables for container deployment.
"""

from __future__ import annotations

import logging
import os

# ===== Server Binding & Backlog =====
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:3000")
backlog = int(os.environ.get("GUNICORN_BACKLOG", "2048"))

# ===== Worker Settings =====
# Operator sessions live in process memory, so a single worker owns them all;
# concurrency comes from gthread threads instead of extra processes.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", "1"))
threads = int(os.environ.get("GUNICORN_THREADS", "8"))

# ===== Timeout Settings =====
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging Configuration =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")  # stdout
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")    # stderr
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

# ===== Security Settings =====
limit_request_line = int(os.environ.get("GUNICORN_LIMIT_REQUEST_LINE", "8190"))
limit_request_fields = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELDS", "100"))
limit_request_field_size = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELD_SIZE", "8190"))

# Proxies allowed to set X-Forwarded-* (client origin is resolved from them when TRUST_PROXY=true)
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")

proc_name = os.environ.get("GUNICORN_PROC_NAME", "visitlog")


# ===== Lifecycle Hooks =====
def on_starting(server):
    """Called just before the master process is initialized."""
    logger = logging.getLogger(__name__)
    logger.info(
        f"Gunicorn starting: workers={workers}, threads={threads}, "
        f"worker_class={worker_class}, timeout={timeout}s"
    )


def when_ready(server):
    """Called just after the server is started."""
    logger = logging.getLogger(__name__)
    logger.info(f"Gunicorn ready. Listening on {bind}")


def worker_abort(worker):
    """Called when a worker is timed out and is being replaced."""
    logger = logging.getLogger(__name__)
    logger.warning(f"Worker {worker.pid} timed out (>{timeout}s), aborting")
