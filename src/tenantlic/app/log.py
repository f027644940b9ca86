# src/tenantlic/app/log.py
import logging
import sys

ROOT_LOGGER = "tenantlic"
FORMAT = "[%(name)s] %(levelname)s %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """One stderr handler on the tenantlic root; -v turns on DEBUG (incl. HTTP tracing)."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT))
        root.addHandler(handler)
    root.propagate = False
    return root
