"""
Production Server Configuration

Run the analytics API with Uvicorn workers under Gunicorn.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
# Range backfills can compute many days in one request
timeout = 120
keepalive = 5
graceful_timeout = 30

proc_name = "ticket-analytics-api"
pidfile = "/tmp/gunicorn.pid"

# Logging
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
accesslog = "-"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'


def post_fork(server, worker):
    """Re-seed structlog/stdlib handlers in each worker."""
    from ticket_analytics.config.logging import configure_logging

    configure_logging()
    server.log.info("Worker spawned (pid: %s)", worker.pid)
