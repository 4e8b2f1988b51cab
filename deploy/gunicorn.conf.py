# Gunicorn configuration
import multiprocessing

bind = "127.0.0.1:5001"
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "gthread"
threads = 4
# Submissions poll Judge0 once per test case; keep above JUDGE0_MAX_POLLS x cases
timeout = 180
keepalive = 5
errorlog = "/var/log/codementor/gunicorn-error.log"
accesslog = "/var/log/codementor/gunicorn-access.log"
loglevel = "info"
