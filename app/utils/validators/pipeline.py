"""
Ordered, short-circuiting request validation.

Each step is a callable ``(payload, context) -> context`` (sync or async).
A step that has nothing to add may return ``None``; the context it received
is carried forward unchanged. A step rejects the request by raising a
``ValidationError`` or ``BusinessRuleViolation``; the first failure stops
the pipeline and is the only error reported.
"""
import inspect
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class ValidationContext:
    """Immutable bag of values derived while validating a request"""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[dict] = None):
        self._values = MappingProxyType(dict(values or {}))

    def with_values(self, **values) -> "ValidationContext":
        merged = dict(self._values)
        merged.update(values)
        return ValidationContext(merged)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def as_dict(self) -> dict:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"ValidationContext({dict(self._values)!r})"


StepResult = Union[ValidationContext, None, Awaitable[Optional[ValidationContext]]]
Step = Callable[[Any, ValidationContext], StepResult]


class ValidationPipeline:
    def __init__(self, steps: Iterable[Step]):
        self.steps = list(steps)

    async def run(self, payload: Any, context: Optional[ValidationContext] = None) -> ValidationContext:
        context = context if context is not None else ValidationContext()
        for step in self.steps:
            try:
                result = step(payload, context)
                if inspect.isawaitable(result):
                    result = await result
            except HTTPException as e:
                logger.info(f"Validation stopped at {_step_name(step)}: {e.detail}")
                raise
            if result is not None:
                context = result
        return context


def when(predicate: Callable[[Any, ValidationContext], bool], *steps: Step) -> Step:
    """Run ``steps`` only when ``predicate(payload, context)`` holds"""
    inner = ValidationPipeline(steps)

    async def conditional(payload, context):
        if predicate(payload, context):
            return await inner.run(payload, context)
        return context

    conditional.__name__ = f"when({', '.join(_step_name(s) for s in steps)})"
    return conditional


def _step_name(step: Step) -> str:
    return getattr(step, "__name__", step.__class__.__name__)
