# Gunicorn configuration file
import os

wsgi_app = "athlete_unknown_api.wsgi:application"

# Server socket
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
worker_class = "sync"
max_requests = 1000
max_requests_jitter = 100

# Timeout settings; a request waits at most for one backend call
timeout = 60
keepalive = 2
graceful_timeout = 30
worker_tmp_dir = "/dev/shm"

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "athlete_unknown_api"

# Server mechanics
daemon = False
pidfile = None
