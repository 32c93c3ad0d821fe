"""
faceless/main.py
ASGI entrypoint: uvicorn faceless.main:app
"""
import logging
import sys

from faceless.api.app import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)

app = create_app()
