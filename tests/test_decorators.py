import asyncio
import inspect
from unittest import mock

from tryto import Options, protect


def test_protect_sync_function_retries_with_arguments():
    calls = []

    @protect(retry=True, retries=2)
    def divide(a, b):
        calls.append((a, b))
        if len(calls) < 2:
            raise ZeroDivisionError("flaky")
        return a / b

    assert divide(6, b=3) == 2
    assert calls == [(6, 3), (6, 3)]
    assert divide.__name__ == "divide"


def test_protect_sync_function_falls_back():
    on_error = mock.Mock()

    @protect(Options(fallback=lambda: "default"), on_error=on_error)
    def broken():
        raise RuntimeError("broken")

    assert broken() == "default"
    on_error.assert_called_once()


def test_protect_coroutine_function():
    attempts = []

    @protect(retry=True, retries=1)
    async def fetch(key):
        attempts.append(key)
        if len(attempts) == 1:
            raise ConnectionError("reset")
        return key.upper()

    assert asyncio.iscoroutinefunction(fetch)
    assert asyncio.run(fetch("abc")) == "ABC"
    assert attempts == ["abc", "abc"]


def test_protect_coroutine_returns_none_on_total_failure():
    @protect(on_error=mock.Mock())
    async def fetch():
        raise ConnectionError("reset")

    assert asyncio.run(fetch()) is None


def test_protect_callable_object_with_async_call():
    class Client:
        def __init__(self):
            self.calls = 0

        async def __call__(self, key):
            self.calls += 1
            if self.calls == 1:
                raise ConnectionError("reset")
            return key * 2

    client = Client()
    fetch = protect(retry=True, retries=1)(client)

    assert inspect.iscoroutinefunction(fetch)
    assert asyncio.run(fetch("ab")) == "abab"
    assert client.calls == 2
