import os

bind = os.getenv("GUNICORN_BIND", "unix:/run/contact-form/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Inline SMTP sends must finish within a request
timeout = int(os.getenv("GUNICORN_TIMEOUT", 90))
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "contact-form"

# Server mechanics
daemon = False
umask = 0o007

# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting contact form server")

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Contact form server is ready. Spawning workers")

def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal."""
    worker.log.info("Worker received SIGABRT signal, likely a request over the timeout")
