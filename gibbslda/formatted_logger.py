import logging
import os
import time

_levels = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARN,
    'warning': logging.WARN,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}


def formatted_logger(label, level=None, format=None, date_format=None, file_path=None, log_dir=None):
    """ Return a logger named `label` with a stream handler, and a file handler
    when `file_path` or `log_dir` is given.

    Handlers are attached only the first time a label is requested, so calling
    this at import time of several modules does not duplicate output.
    """
    log = logging.getLogger(label)
    if level is None:
        level = logging.INFO
    elif isinstance(level, str):
        level = _levels[level.lower()]
    log.setLevel(level)

    if log.handlers:
        return log

    if format is None:
        format = '%(asctime)s %(levelname)s:%(name)s:%(message)s'
    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'
    if file_path is None and log_dir is not None:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_path = '%s/%s.%s.log.txt' % (log_dir, label, time.strftime("%Y-%m-%d_%H-%M-%S", time.localtime()))

    formatter = logging.Formatter(format, date_format)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)
    if file_path is not None:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)
    return log
