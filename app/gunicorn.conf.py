# Production Gunicorn Server Config
# Docs: https://docs.gunicorn.org/en/latest/settings.html#

import os

PORT = os.environ.get("PORT", "8000")

bind = f"0.0.0.0:{PORT}"

wsgi_app = "app.asgi:application"
worker_class = "app.asgi.DjangoUvicornWorker"
timeout = 60
# Mirrors live in process memory, each worker keeps its own copy
workers = int(os.environ.get("WORKER_COUNT", 2))
threads = int(os.environ.get("THREAD_COUNT", 1))
preload = True  # Load application code before the worker processes are forked.
