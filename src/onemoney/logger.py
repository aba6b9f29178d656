"""
Custom Logging Module
^^^^^^^^^^^^^^^^^^^^^
Provides a setup_logger function to configure the `onemoney` loggers using
the packaged logger.cfg.
"""
import configparser
import logging
import logging.config
import os

LOGGER_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "logger.cfg"
)


def setup_logger(name, level=None):
    """
    Set up a logger with the provided name using the 'logger.cfg' file.

    If `level` is given it overrides the level of the `onemoney` logger
    read from the file.
    """
    config = configparser.ConfigParser()
    config.read(LOGGER_CONFIG_PATH)
    logging.config.fileConfig(config, disable_existing_loggers=False)

    if level is not None:
        logging.getLogger("onemoney").setLevel(level)

    logger = logging.getLogger(name)

    return logger
