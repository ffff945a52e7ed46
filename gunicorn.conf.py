"""
Gunicorn configuration for the site builder service.
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"

# Worker configuration
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = 60
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
capture_output = True

proc_name = 'sitebuilder'

preload_app = True
graceful_timeout = 30


def on_starting(server):
    print("[Gunicorn] Starting site builder server...")


def on_exit(server):
    print("[Gunicorn] Site builder server shutting down...")
