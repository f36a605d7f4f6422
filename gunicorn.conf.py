"""
Gunicorn configuration for the garden gateway.

Run with:  gunicorn -c gunicorn.conf.py garden.main:app
  PORT     — TCP port to bind (default: 3000)
  WORKERS  — worker processes (default: 1). Each holds its own daily quote
             cache, so each extra worker may add one generation per day.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '3000')}"
workers = int(os.environ.get("WORKERS", "1"))
worker_class = "uvicorn.workers.UvicornWorker"

# Must exceed OPENAI_TIMEOUT.
timeout = 120
graceful_timeout = 30

loglevel = "info"
accesslog = "-"
errorlog = "-"
