"""Parameterized measure families."""

import inspect
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

import jax
import jax.numpy as jnp

from measuretheory.exceptions import ArityMismatchError, UnknownParameterError
from measuretheory.measures.measure import AbstractMeasure


def is_positional_params(params: Any) -> bool:
    """Check if a parameter value is an ordered, unnamed collection of values."""
    if isinstance(params, (str, bytes, Mapping)):
        return False
    ndim = getattr(params, "ndim", None)
    if ndim is not None:
        return ndim == 1
    return isinstance(params, Sequence)


class ParameterizedMeasure(AbstractMeasure):
    """A measure belonging to a family indexed by named parameters.

    Subclasses declare ``param_names`` in canonical order and store each
    parameter in a field of the same name. The family itself is the subclass;
    ``from_params`` builds an instance from either a name->value mapping or a
    positional sequence ordered like ``param_names``.
    """

    param_names: ClassVar[tuple[str, ...]] = ()

    @property
    def params(self) -> dict[str, Any]:
        """The parameters of the measure in canonical order."""
        return {name: getattr(self, name) for name in self.param_names}

    @classmethod
    def check_param_names(cls, names: Any) -> None:
        """Raise if any of the names is not a declared parameter of the family."""
        unknown = [name for name in names if name not in cls.param_names]
        if unknown:
            raise UnknownParameterError(
                f"Unknown parameters for {cls.__name__}: {', '.join(map(str, unknown))}.  "
                f"Declared parameters are: {', '.join(cls.param_names)}"
            )

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | Sequence[Any]) -> "ParameterizedMeasure":
        """Build a member of the family from named or positional parameters."""
        if is_positional_params(params):
            values = list(params)
            if len(values) != len(cls.param_names):
                raise ArityMismatchError(
                    f"{cls.__name__} takes {len(cls.param_names)} positional parameters "
                    f"({', '.join(cls.param_names)}), got {len(values)}"
                )
            params = dict(zip(cls.param_names, values, strict=True))
        if not isinstance(params, Mapping):
            raise TypeError(f"Parameters must be a mapping or a sequence, got {type(params)}")

        cls.check_param_names(params)
        sig = inspect.signature(cls.__init__)
        try:
            sig.bind(None, **params)
        except TypeError as e:
            raise ArityMismatchError(f"Invalid parameters for {cls.__name__}: {e}") from e
        return cls(**params)

    def __repr__(self) -> str:
        params = ", ".join(f"{name}={_format_param(value)}" for name, value in self.params.items())
        return f"{type(self).__name__}({params})"


def _format_param(value: Any) -> str:
    if isinstance(value, jax.Array) and value.ndim == 0:
        return f"{value.item():g}"
    return repr(value)


def as_float_array(value: Any) -> jax.Array:
    """Convert a parameter value to a floating point array."""
    value = jnp.asarray(value)
    if not jnp.issubdtype(value.dtype, jnp.floating):
        value = value.astype(jnp.result_type(float))
    return value
