# gunicorn.conf.py
#   gunicorn -c gunicorn.conf.py
import logging
import multiprocessing
import os

from edutrack.app_logger import QUIET_LOGGERS, logging_config

# app factory; the package must be importable (pip install -e . or PYTHONPATH=src)
wsgi_app = "edutrack.main:create_app()"

# networking
host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "8000"))
bind = f"{host}:{port}"

# workers; SQLite allows one writer, so keep WEB_CONCURRENCY low unless DATABASE_URL is Postgres
workers = int(os.getenv("WEB_CONCURRENCY", min(multiprocessing.cpu_count() * 2 + 1, 4)))
worker_class = "uvicorn.workers.UvicornWorker"
preload_app = False

# timeouts; uploads can take a while on slow school connections
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# logging: same JSON formatter as the app, master and workers alike
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
capture_output = True
logconfig_dict = logging_config(
    os.getenv("LOG_LEVEL", "INFO"),
    fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s",
)
logconfig_dict["loggers"].update({
    "gunicorn.error":  {"level": "INFO", "handlers": ["console"], "propagate": False},
    "gunicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
})

max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("GUNICORN_MAX_REQUESTS_JITTER", "100"))


def post_fork(server, worker):
    # the app re-runs dictConfig on import; keep the noisy loggers quiet after that too
    for name in QUIET_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.ERROR)
        lg.propagate = False
