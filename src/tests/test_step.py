import pytest

from command_chain.step import DeferredStep
from command_chain.step import Step
from command_chain.step import is_deferred


class CallCounter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


class DoubleStep(Step):
    def execute(self, payload: dict[str, int]) -> None:
        payload["result"] = payload["input"] * 2


class DuckDeferred:
    is_deferred = True

    def register_completion_callback(self, callback: object) -> None:
        self.callback = callback

    def execute(self, payload: object) -> None:
        pass


class TaggedWithoutCallback:
    is_deferred = True

    def execute(self, payload: object) -> None:
        pass


def test_immediate_step_effect_is_visible_on_return() -> None:
    payload = {"input": 5}

    DoubleStep().execute(payload)

    assert payload["result"] == 10


def test_base_step_requires_execute_override() -> None:
    with pytest.raises(NotImplementedError):
        Step().execute({})


def test_command_complete_invokes_callback_once() -> None:
    counter = CallCounter()
    step = DeferredStep()
    step.register_completion_callback(counter)

    step.command_complete()
    step.command_complete()

    assert counter.calls == 1


def test_command_complete_without_callback_is_noop() -> None:
    step = DeferredStep()

    step.command_complete()


def test_command_complete_tolerates_subclass_without_super_init() -> None:
    class NoInit(DeferredStep):
        def __init__(self) -> None:
            pass

    NoInit().command_complete()


def test_is_deferred_uses_capability_tag() -> None:
    assert is_deferred(DeferredStep()) is True
    assert is_deferred(DoubleStep()) is False
    assert is_deferred(DuckDeferred()) is True
    assert is_deferred(TaggedWithoutCallback()) is False
    assert is_deferred(object()) is False
