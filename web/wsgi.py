"""
WSGI entrypoint. In production, point your server (gunicorn/uwsgi) here:

    gunicorn 'wsgi:app' --bind 127.0.0.1:5000

Run a single worker: the capture session lives in process memory.
"""

from dotenv import load_dotenv

load_dotenv()  # before lcuapp.config reads the environment

from lcuapp import create_app  # noqa: E402

app = create_app()
