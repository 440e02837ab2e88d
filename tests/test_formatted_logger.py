import logging

from gibbslda.formatted_logger import formatted_logger


def test_handlers_are_attached_once():
    first = formatted_logger('gibbslda-test-once', 'debug')
    second = formatted_logger('gibbslda-test-once', 'debug')
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG


def test_log_dir_adds_file_handler(tmp_path):
    log = formatted_logger('gibbslda-test-file', log_dir=str(tmp_path / 'logs'))
    log.info('hello')
    for handler in log.handlers:
        handler.flush()
    files = list((tmp_path / 'logs').iterdir())
    assert len(files) == 1
    assert 'hello' in files[0].read_text()
    for handler in list(log.handlers):
        handler.close()
        log.removeHandler(handler)
