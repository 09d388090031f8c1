# iconkit/cli/__init__.py
import logging
import sys


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )
