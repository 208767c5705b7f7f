from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # socrata_client logs each dispatched GET at DEBUG; httpx logs it again at INFO
    for name in ("socrata_client", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(level)
