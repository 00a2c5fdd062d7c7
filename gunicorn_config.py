# gunicorn_config.py
# uso: gunicorn -c gunicorn_config.py run:app

import multiprocessing
import os
from relay.settings import load_settings

settings = load_settings()
PORT = int(settings.get("PORT", os.getenv("PORT", 3000)))
CONFIG_NAME = settings.get("CONFIG_NAME", os.getenv("CONFIG_NAME"))

bind = f"0.0.0.0:{PORT}"
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "sync"         # handlers bloqueiam nas chamadas à GupShup
timeout = 120                 # acima de PARTNER_API_TIMEOUT
keepalive = 5
errorlog = "-"
accesslog = "-"
loglevel = "info"

reload = CONFIG_NAME == "dev"
