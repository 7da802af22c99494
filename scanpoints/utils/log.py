"""This module implements utility classes and functions for logging."""

import logging

import termcolor

from scanpoints import conf

if conf.debug_enabled():
    LOG_LEVEL = logging.DEBUG
else:
    LOG_LEVEL = logging.INFO

LOG_FORMAT = '%(asctime)s [%(name)s] %(message)s'
DATE_FORMAT = '%b/%d %H:%M:%S'


class ColoredConsoleHandler(logging.StreamHandler):
    """A console handler which colors records by severity."""

    COLORS = {
        logging.DEBUG: 'cyan',
        logging.WARNING: 'yellow',
        logging.ERROR: 'red',
        logging.CRITICAL: 'red',
    }

    def emit(self, record):
        try:
            msg = self.format(record)
            color = self.COLORS.get(record.levelno)
            if color:
                msg = termcolor.colored(msg, color)
            self.stream.write("%s\n" % msg)
            self.flush()
        except Exception:
            self.handleError(record)


def get_module_logger(name):
    """A factory which creates loggers with the given name and returns it."""
    name = name.split('.')[-1]
    _logger = logging.getLogger(name)
    _logger.setLevel(LOG_LEVEL)
    _logger.addHandler(logging.NullHandler())
    return _logger


def log_to_console(level=LOG_LEVEL):
    """Add a log handler which logs to the console."""

    console = ColoredConsoleHandler()
    console.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console.setFormatter(formatter)
    logging.getLogger('').addHandler(console)
    return console


def log_to_file(filename, level=logging.DEBUG):
    """Add a log handler which logs to a file."""
    logfile = logging.FileHandler(filename)
    logfile.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    logfile.setFormatter(formatter)
    logging.getLogger('').addHandler(logfile)
    return logfile
