import inspect
import logging
import math
import numbers
from collections.abc import Callable
from typing import Any

from .strategies import Constant

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a node is declared with a missing or malformed property."""


class PolicyEvaluationError(TypeError):
    """Raised when a user policy returns something that is not a number."""

    def __init__(self, node_name: str, prop: str, result: object):
        self.node_name = node_name
        self.prop = prop
        self.result = result
        super().__init__(
            f"Property '{prop}' of node '{node_name}' must return a number, got {type(result).__name__}"
        )


def is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _accepts(fn: Callable[..., Any], arity: int) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return True
    try:
        signature.bind(*([0.0] * arity))
    except TypeError:
        return False
    return True


def as_policy(value: object, arity: int, prop: str) -> Callable[..., Any]:
    """Normalise a policy property into a callable of ``arity`` arguments.

    Plain numbers become constant policies.
    """
    if value is None:
        raise ConfigurationError(f"{prop} is required")
    if is_number(value):
        return Constant(float(value))
    if callable(value):
        if not _accepts(value, arity):
            raise ConfigurationError(f"{prop} must be a {arity} argument callable or a number")
        return value
    raise ConfigurationError(f"{prop} must be a number or a {arity} argument callable, got {type(value).__name__}")


def call_policy(fn: Callable[..., Any], args: tuple[float, ...], prop: str, node_name: str) -> float:
    """Invoke a policy and coerce its result to a finite float.

    Non-numeric results are fatal; NaN and infinities count as zero.
    """
    result = fn(*args)
    if not is_number(result):
        raise PolicyEvaluationError(node_name, prop, result)
    value = float(result)
    if math.isnan(value) or math.isinf(value):
        logger.debug(f"Node '{node_name}': {prop}{args} returned {value}, using 0")
        return 0.0
    return value
