import json
import logging

import pytest

from mood.utils.logging_utils import (
    RequestIDFilter, StructuredFormatter, clear_request_context, get_request_id,
    log_execution_time, set_request_id,
)


@pytest.fixture(autouse=True)
def reset_context():
    clear_request_context()
    yield
    clear_request_context()


def make_record(message='hello', **extra):
    record = logging.LogRecord('mood.test', logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_json_line_with_request_id_and_extras(self):
        set_request_id('req-1')
        payload = json.loads(StructuredFormatter().format(make_record(user_id=7)))

        assert payload['message'] == 'hello'
        assert payload['level'] == 'INFO'
        assert payload['logger'] == 'mood.test'
        assert payload['request_id'] == 'req-1'
        assert payload['user_id'] == 7

    def test_outside_a_request(self):
        payload = json.loads(StructuredFormatter().format(make_record()))
        assert payload['request_id'] == '-'


def test_request_id_filter():
    set_request_id('abc')
    record = make_record()
    assert RequestIDFilter().filter(record) is True
    assert record.request_id == 'abc'
    clear_request_context()
    assert get_request_id() == '-'


class TestLogExecutionTime:

    def test_returns_result(self):
        @log_execution_time('unit.add')
        def add(a, b):
            return a + b

        assert add(2, 3) == 5

    def test_reraises(self):
        @log_execution_time()
        def explode():
            raise KeyError('x')

        with pytest.raises(KeyError):
            explode()
