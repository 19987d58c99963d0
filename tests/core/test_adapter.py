"""
Action Adapter - Unit Tests

Classification of action return values and their normalized streams.
"""
import asyncio
import pytest
from unittest.mock import MagicMock

from rxcommand.core.commands.adapter import Deferred, Immediate, Multi, adapt, classify, to_stream
from rxcommand.core.events import Stream, Subject


def collect(stream):
    values, errors = [], []
    completed = MagicMock()
    stream.subscribe(values.append, errors.append, completed)
    return values, errors, completed


class TestClassify:

    def test_plain_value(self):
        assert classify(lambda x: x + 1, 1) == Immediate(2)

    def test_none_is_a_value(self):
        assert classify(lambda x: None, 1) == Immediate(None)

    @pytest.mark.parametrize("value", [[1, 2, 3], (1, 2), "text", {"a": 1}])
    def test_containers_are_single_values(self, value):
        assert classify(lambda _: value, None) == Immediate(value)

    def test_coroutine_is_deferred(self):
        async def action(x):
            return x

        shape = classify(action, 1)
        assert isinstance(shape, Deferred)
        shape.awaitable.close()

    def test_stream_is_multi(self):
        stream = Stream.of(1, 2)
        assert classify(lambda _: stream, None) == Multi(stream)

    def test_generator_is_multi(self):
        def action(n):
            yield from range(n)

        assert isinstance(classify(action, 3), Multi)

    def test_async_generator_is_multi(self):
        async def action(n):
            for i in range(n):
                yield i

        assert isinstance(classify(action, 3), Multi)

    def test_raising_action_becomes_failing_stream(self):
        error = ValueError("boom")

        def action(_):
            raise error

        shape = classify(action, None)
        values, errors, completed = collect(to_stream(shape))

        assert values == []
        assert errors == [error]
        completed.assert_not_called()


class TestAdapt:

    def test_immediate_emits_once_and_completes(self):
        values, errors, completed = collect(adapt(lambda p: "RESULT + " + p, "Test"))

        assert values == ["RESULT + Test"]
        assert errors == []
        completed.assert_called_once_with()

    def test_stream_passes_through(self):
        values, _, completed = collect(adapt(lambda _: Stream.of(1, 2, 3), None))

        assert values == [1, 2, 3]
        completed.assert_called_once_with()

    def test_generator_values(self):
        def action(n):
            for i in range(n):
                yield i * i

        values, _, _ = collect(adapt(action, 4))
        assert values == [0, 1, 4, 9]

    def test_hot_stream_is_not_completed_by_adapter(self):
        subject = Subject()
        values, _, completed = collect(adapt(lambda _: subject, None))

        subject.on_next("a")
        completed.assert_not_called()
        subject.on_completed()

        assert values == ["a"]
        completed.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_deferred_resolves(self):
        async def action(x):
            await asyncio.sleep(0)
            return x * 2

        values, errors, completed = collect(adapt(action, 21))
        await asyncio.sleep(0.01)

        assert values == [42]
        completed.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_deferred_rejection_is_stream_error(self):
        async def action(_):
            raise ConnectionError("offline")

        values, errors, completed = collect(adapt(action, None))
        await asyncio.sleep(0.01)

        assert values == []
        assert isinstance(errors[0], ConnectionError)
        completed.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancellation_is_dropped(self, log_messages):
        future = asyncio.get_running_loop().create_future()
        values, errors, completed = collect(adapt(lambda _: future, None))

        future.cancel()
        await asyncio.sleep(0)

        assert errors == []
        completed.assert_called_once_with()
        assert any("WARNING" in m and "CancelledError" in m for m in log_messages)
