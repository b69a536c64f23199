"""
Logging for the pendulum letters sketch.

At INFO the log follows the drawing: sessions started, settled and
cleared, every parameter change from the keyboard or the panel, and saved
snapshots. A text containing letters too wide to ever be placed is reported
as a WARNING. Failed snapshots are logged with their traceback. DEBUG adds
ignored pointer events and the font file used to measure glyphs.
"""
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO, log_file=None):
    """
    Route the sketch's log records to stdout and, optionally, to `log_file`.

    Calling it again replaces the handlers of the previous call. matplotlib's
    own loggers stay at INFO or quieter, since its font lookup floods DEBUG.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger('matplotlib').setLevel(max(logger.level, logging.INFO))

    logger.debug("Logging to stdout%s", f" and {log_file}" if log_file else "")
    return logger
