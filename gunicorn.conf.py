"""
Gunicorn settings for the Standup API container.

Overridable through the environment:
  PORT       port to bind (default 8000)
  WORKERS    worker processes (default 2)
  LOG_LEVEL  gunicorn error-log level (default info)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

# Checklist generation waits on the text-generation provider.
timeout = 120
graceful_timeout = 30
keepalive = 5

# Application logs are configured in app.core.logging; gunicorn only adds
# its own error and access streams, both on stdout.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sus'
