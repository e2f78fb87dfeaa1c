import pytest

from foyle.retry import Code, ConnectError, RetryInterceptor


class FakeAgent:
    def __init__(self, failures, code=Code.DEADLINE_EXCEEDED):
        self.failures = failures
        self.code = code
        self.num_tries = 0

    def generate_cells(self, request):
        self.num_tries += 1
        if self.num_tries <= self.failures:
            raise ConnectError(self.code, "Deadline exceeded")
        return {"cells": [{"kind": "markup"}]}


def _interceptor(max_retries, sleeps):
    return RetryInterceptor(max_retries=max_retries, backoff=0.01, sleep=sleeps.append)


def test_retry_succeeds_after_deadline_exceeded():
    sleeps = []
    fake = FakeAgent(failures=1)
    call = _interceptor(3, sleeps).wrap_unary(fake.generate_cells)
    resp = call({})
    assert len(resp["cells"]) == 1
    assert fake.num_tries == 2
    assert sleeps == [0.01]


def test_retry_on_canceled():
    sleeps = []
    fake = FakeAgent(failures=2, code=Code.CANCELED)
    resp = _interceptor(3, sleeps).wrap_unary(fake.generate_cells)({})
    assert len(resp["cells"]) == 1
    assert fake.num_tries == 3


def test_gives_up_after_max_retries():
    sleeps = []
    fake = FakeAgent(failures=10)
    call = _interceptor(3, sleeps).wrap_unary(fake.generate_cells)
    with pytest.raises(ConnectError) as info:
        call({})
    assert info.value.code is Code.DEADLINE_EXCEEDED
    assert fake.num_tries == 4
    assert len(sleeps) == 4


def test_other_codes_are_not_retried():
    sleeps = []
    fake = FakeAgent(failures=1, code=Code.NOT_FOUND)
    with pytest.raises(ConnectError) as info:
        _interceptor(3, sleeps).wrap_unary(fake.generate_cells)({})
    assert info.value.code is Code.NOT_FOUND
    assert fake.num_tries == 1
    assert sleeps == []


def test_plain_exceptions_propagate_immediately():
    calls = []

    def boom(request):
        calls.append(request)
        raise ValueError("bad")

    with pytest.raises(ValueError):
        _interceptor(3, []).wrap_unary(boom)("r")
    assert calls == ["r"]


def test_wrapped_connect_error_is_retried():
    attempts = []

    def flaky(request):
        attempts.append(request)
        if len(attempts) == 1:
            try:
                raise ConnectError(Code.DEADLINE_EXCEEDED)
            except ConnectError as err:
                raise RuntimeError("wrapped") from err
        return "ok"

    assert _interceptor(2, []).wrap_unary(flaky)("x") == "ok"
    assert len(attempts) == 2


def test_connect_error_message():
    err = ConnectError(Code.DEADLINE_EXCEEDED, "too slow")
    assert str(err) == "deadline_exceeded: too slow"
    assert err.message == "too slow"