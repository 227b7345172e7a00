# log.py: one-time logging setup shared by the web app and the CLI

import logging
import sys

FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level="INFO"):
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # someone (gunicorn, pytest, a second call) already set up handlers
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
    root.addHandler(handler)
