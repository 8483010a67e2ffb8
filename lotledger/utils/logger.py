# lotledger/utils/logger.py

import logging
import os
from datetime import datetime

LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"


def _log_path(log_dir, name):
    os.makedirs(log_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(log_dir, f"{name}_{stamp}.log")


def setup_logger(name="lotledger", log_dir=None, console_level=logging.INFO):
    """
    Configure the ``lotledger`` logger tree once and return it.

    Lot openings, divisions and booked gains show on the console; the
    DEBUG trace (lot searches, cost-basis arithmetic) goes to a timestamped
    file under *log_dir* when one is given.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        # Already configured by an earlier ledger or the CLI
        return logger

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    handlers[0].setLevel(console_level)
    if log_dir is not None:
        file_handler = logging.FileHandler(_log_path(log_dir, name))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
