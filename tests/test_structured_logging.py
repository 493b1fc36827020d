import io
import json
import logging

import pytest

from relnotes.logging import StructuredLogger, configure_logging, get_logger


def _lines(stream: io.StringIO) -> list[str]:
    return [line for line in stream.getvalue().splitlines() if line]


def test_structured_logger_json_format():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-json', json_logging=True, level='INFO', stream=stream)
    logger.log_operation('fetch_milestones', repo='acme/api', count=3)

    (line,) = _lines(stream)
    data = json.loads(line)
    assert data['level'] == 'INFO'
    assert data['operation'] == 'fetch_milestones'
    assert data['repo'] == 'acme/api'
    assert data['count'] == 3
    assert 'timestamp' in data


def test_structured_logger_regular_format():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-text', json_logging=False, level='INFO', stream=stream)
    logger.log_operation('fetch_pulls')

    out = stream.getvalue()
    assert 'Operation: fetch_pulls' in out
    assert 'INFO' in out


def test_level_filters_info():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-level', level='WARNING', stream=stream)
    logger.info('hidden')
    logger.warning('shown')
    assert _lines(stream)[-1].endswith('shown')
    assert 'hidden' not in stream.getvalue()


def test_level_is_set_on_the_named_stdlib_logger():
    StructuredLogger(name='test-level-stdlib', level='debug', stream=io.StringIO())
    assert logging.getLogger('test-level-stdlib').level == logging.DEBUG
    assert not hasattr(StructuredLogger, 'level')


def test_json_output_redacts_tokens():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-redact', json_logging=True, level='DEBUG', stream=stream)
    logger.log_error('request failed', error='bad creds ghp_ABCDEFGHIJKLMNOPQRSTUVWX')
    data = json.loads(_lines(stream)[0])
    assert 'ghp_' not in data['error']


def test_timed_operation_logs_start_and_performance():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-timed', json_logging=True, level='INFO', stream=stream)
    with logger.timed_operation('fetch_pulls', repo='acme/api'):
        pass
    records = [json.loads(line) for line in _lines(stream)]
    assert [r['operation'] for r in records] == ['fetch_pulls_start', 'fetch_pulls']
    assert 'duration_ms' in records[1]


def test_timed_operation_logs_and_reraises_failures():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-timed-fail', json_logging=True, level='INFO', stream=stream)
    with pytest.raises(RuntimeError):
        with logger.timed_operation('fetch_pulls'):
            raise RuntimeError('boom')
    records = [json.loads(line) for line in _lines(stream)]
    assert records[-1]['level'] == 'ERROR'
    assert records[-1]['error'] == 'boom'


def test_configure_logging_replaces_global():
    stream = io.StringIO()
    logger = configure_logging(json_logging=False, level='DEBUG', stream=stream)
    assert get_logger() is logger
    logger.debug('visible at debug')
    assert 'visible at debug' in stream.getvalue()
