import pytest

from app.core.exceptions import BusinessRuleViolation, ValidationError
from app.utils.validators.pipeline import ValidationContext, ValidationPipeline, when


def test_context_is_immutable():
    context = ValidationContext({"a": 1})
    updated = context.with_values(b=2)

    assert "b" not in context
    assert updated.get("a") == 1
    assert updated["b"] == 2
    assert context.get("b", "missing") == "missing"
    with pytest.raises(TypeError):
        context._values["c"] = 3


async def test_steps_run_in_order_and_thread_the_context():
    calls = []

    def first(payload, context):
        calls.append("first")
        return context.with_values(total=payload["value"])

    async def second(payload, context):
        calls.append("second")
        return context.with_values(total=context["total"] * 2)

    def third(payload, context):
        calls.append("third")

    context = await ValidationPipeline([first, second, third]).run({"value": 21})

    assert calls == ["first", "second", "third"]
    assert context["total"] == 42


async def test_first_failure_stops_the_pipeline():
    calls = []

    def failing(payload, context):
        calls.append("failing")
        raise ValidationError("first problem")

    async def never(payload, context):
        calls.append("never")
        raise BusinessRuleViolation("second problem")

    with pytest.raises(ValidationError) as exc_info:
        await ValidationPipeline([failing, never]).run({})

    assert exc_info.value.detail == "first problem"
    assert calls == ["failing"]


async def test_initial_context_is_kept():
    context = await ValidationPipeline([]).run({}, ValidationContext({"setting_id": 7}))
    assert context["setting_id"] == 7


async def test_when_skips_steps_if_predicate_fails():
    def mark(payload, context):
        return context.with_values(marked=True)

    pipeline = ValidationPipeline([
        when(lambda payload, context: payload["custom"], mark),
    ])

    assert (await pipeline.run({"custom": True})).get("marked") is True
    assert (await pipeline.run({"custom": False})).get("marked") is None


async def test_when_propagates_failures():
    def reject(payload, context):
        raise BusinessRuleViolation()

    pipeline = ValidationPipeline([when(lambda payload, context: True, reject)])
    with pytest.raises(BusinessRuleViolation) as exc_info:
        await pipeline.run({})
    assert exc_info.value.detail == "Action not allowed"
