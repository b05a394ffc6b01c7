"""Gunicorn configuration for the Pousada Admin API."""

import os

# Server socket
bind = os.environ.get('POUSADA_BIND', '0.0.0.0:8000')

# SQLite takes one writer at a time: a couple of threaded workers is enough
# and keeps BEGIN IMMEDIATE contention low.
workers = int(os.environ.get('POUSADA_WORKERS', 2))
threads = int(os.environ.get('POUSADA_THREADS', 4))
worker_class = 'gthread'

# JSON endpoints answer quickly; the widest occupancy grid is one year
timeout = 30
graceful_timeout = 20
keepalive = 5

# Logging
log_dir = os.environ.get('POUSADA_LOG_DIR', 'logs')
os.makedirs(log_dir, exist_ok=True)
accesslog = os.path.join(log_dir, 'gunicorn-access.log')
errorlog = os.path.join(log_dir, 'gunicorn-error.log')
loglevel = os.environ.get('POUSADA_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'pousada-admin'

# The factory validates production config once, before forking
preload_app = True

max_requests = 1000
max_requests_jitter = 50

# Request bodies are small JSON documents
limit_request_line = 4094
limit_request_fields = 50
limit_request_field_size = 8190
