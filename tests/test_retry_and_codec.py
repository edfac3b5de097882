"""
Tests for the timeout retry policy and payload decoding
"""
import pytest

from esp_adapter.codec import GENERIC_FAILURE_MESSAGE, JsonCodec, decode_payload
from esp_adapter.errors import (
    DecodeFailureError,
    ErrorKind,
    RequestTimeoutError,
    ResourceNotFoundError,
    ServerError,
)
from esp_adapter.retry import MAX_RETRIES, call_with_retry


class Attempts:
    """Callable that replays a scripted sequence of results and errors"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestRetryPolicy:

    def test_max_retries_is_one(self):
        assert MAX_RETRIES == 1

    def test_success_needs_one_attempt(self):
        operation = Attempts({'ok': True})
        assert call_with_retry(operation) == {'ok': True}
        assert operation.calls == 1

    def test_timeout_then_success(self):
        operation = Attempts(RequestTimeoutError(status=408), {'ok': True})
        assert call_with_retry(operation) == {'ok': True}
        assert operation.calls == 2

    def test_two_timeouts_propagate(self):
        second = RequestTimeoutError(status=408, message='second')
        operation = Attempts(RequestTimeoutError(status=408, message='first'), second, {'ok': True})
        with pytest.raises(RequestTimeoutError) as excinfo:
            call_with_retry(operation)
        assert excinfo.value is second
        assert operation.calls == 2

    def test_other_errors_are_not_retried(self):
        operation = Attempts(ResourceNotFoundError(status=404), {'ok': True})
        with pytest.raises(ResourceNotFoundError):
            call_with_retry(operation)
        assert operation.calls == 1

    def test_zero_retries(self):
        operation = Attempts(RequestTimeoutError(status=408), {'ok': True})
        with pytest.raises(RequestTimeoutError):
            call_with_retry(operation, max_retries=0)
        assert operation.calls == 1


class TestDecodePayload:

    @pytest.mark.parametrize('body', ['', b'', None])
    def test_empty_body_is_absent(self, body):
        assert decode_payload(body) is None

    def test_valid_json(self):
        assert decode_payload('{"lists": [{"id": "x"}], "total_items": 1}') == {
            'lists': [{'id': 'x'}],
            'total_items': 1,
        }

    def test_bytes_body(self):
        assert decode_payload(b'{"id": "a354d4c865"}') == {'id': 'a354d4c865'}

    def test_malformed_body_is_masked_as_server_error(self):
        with pytest.raises(ServerError) as excinfo:
            decode_payload('{"lists": [')
        assert isinstance(excinfo.value, DecodeFailureError)
        assert excinfo.value.kind is ErrorKind.DECODE_FAILURE
        assert excinfo.value.status == 500
        assert excinfo.value.message == GENERIC_FAILURE_MESSAGE == 'Something went wrong!'

    def test_custom_codec(self):
        class UpperCodec(JsonCodec):
            def parse(self, text):
                return {'raw': text.upper()}

        assert decode_payload('abc', UpperCodec()) == {'raw': 'ABC'}
