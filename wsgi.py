"""
WSGI entry point and Flask CLI app.

Usage:
    flask --app wsgi init-db --demo
    flask --app wsgi db upgrade
    gunicorn wsgi:app
"""

from studioboard import create_app

app = create_app()
