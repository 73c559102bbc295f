"""
Gunicorn configuration for the market reaction simulator.

    gunicorn -c gunicorn.conf.py

Port and log level come from the application settings (PORT, LOG_LEVEL in
the environment or .env), so the server and `marketsim-serve` agree.
WORKERS overrides the worker count (default: 2).
"""
import os

from marketsim.core.config import settings

wsgi_app = "marketsim.main:app"

bind = f"0.0.0.0:{settings.PORT}"

workers = int(os.environ.get("WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 60
graceful_timeout = 30
keepalive = 5

# An unparsable DATABASE_URL fails here, before workers fork.
preload_app = True

loglevel = settings.LOG_LEVEL.lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
