################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Dual numbers for forward-mode automatic differentiation

A dual value pairs a primal ``value`` with a ``derivative`` vector holding the
partial derivatives of that value with respect to N independent inputs. Every
operator applies the chain rule to the operand derivatives, so evaluating an
expression once yields both its value and its exact gradient.

The width N and the scalar dtype are bound by subscripting the type:

    Dual3 = Dual[3]                 # float64 scalars
    Dual3f = Dual[3, np.float32]    # float32 scalars

    x = Dual3(2.0, 0)               # seeded input 0
    y = Dual3(3.0, 1)               # seeded input 1
    c = Dual3(4.0)                  # constant

Each (N, dtype) pair maps to one cached class. Operators only combine duals of
the same class; mixing widths or dtypes makes the operator return
NotImplemented so Python raises TypeError before any result is formed.

Domain violations (division by zero, sqrt of a negative, inverse trig outside
[-1, 1]) propagate NaN or infinity through the value and every derivative
channel, exactly like the plain scalar operation. numpy floating-point
warnings are silenced inside the algebra.
"""

from __future__ import annotations

import functools
import numbers
import operator
import threading
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import ClassVar
from typing import Optional
from typing import TypeVar

import numpy as np
from numpy.typing import DTypeLike
from numpy.typing import NDArray


_F = TypeVar("_F", bound=Callable[..., Any])

# Cache of width-bound classes, keyed by (width, dtype)
_BOUND_TYPES: dict[tuple[int, np.dtype], type["Dual"]] = {}
_BOUND_TYPES_LOCK: threading.Lock = threading.Lock()


def _propagate_nonfinite(func: _F) -> _F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _is_scalar(x: object) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, Dual)


@dataclass(frozen=True, eq=False)
class Dual:
    """Dual number with a fixed-width derivative vector."""

    # Seed index meaning "not an input"
    NO_INPUT: ClassVar[int] = 65535

    # Bound by Dual[N] / Dual[N, dtype]; zero for the unbound base type
    WIDTH: ClassVar[int] = 0
    DTYPE: ClassVar[np.dtype] = np.dtype(np.float64)

    value: Any
    derivative: Any = None

    # Make numpy scalars and arrays defer to the reflected operators
    __array_ufunc__ = None

    def __post_init__(self) -> None:
        cls: type[Dual] = type(self)
        if cls.WIDTH <= 0:
            raise TypeError("Dual width is unbound, construct through Dual[N]")

        value: np.floating = cls.DTYPE.type(self.value)

        derivative: NDArray[Any]
        if self.derivative is None:
            derivative = np.zeros(cls.WIDTH, dtype=cls.DTYPE)
        elif isinstance(self.derivative, numbers.Integral) and not isinstance(
            self.derivative, bool
        ):
            derivative = np.zeros(cls.WIDTH, dtype=cls.DTYPE)
            index: int = int(self.derivative)
            if 0 <= index < cls.WIDTH:
                derivative[index] = cls.DTYPE.type(1)
        else:
            derivative = np.array(self.derivative, dtype=cls.DTYPE)
            if derivative.shape != (cls.WIDTH,):
                raise ValueError(f"derivative must have length {cls.WIDTH}")

        derivative.flags.writeable = False
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "derivative", derivative)

    def __class_getitem__(cls, params: Any) -> type[Dual]:
        """Return the Dual class bound to a width and optional dtype."""
        if isinstance(params, tuple):
            if len(params) != 2:
                raise TypeError("Dual[...] takes a width and an optional dtype")
            width, dtype_like = params
        else:
            width, dtype_like = params, np.float64
        return bind(width, dtype_like)

    @classmethod
    def _make(cls, value: Any, derivative: NDArray[Any]) -> Dual:
        # Operator fast path; derivative must be a fresh array owned by the result
        result: Dual = object.__new__(cls)
        derivative = np.asarray(derivative, dtype=cls.DTYPE)
        derivative.flags.writeable = False
        object.__setattr__(result, "value", cls.DTYPE.type(value))
        object.__setattr__(result, "derivative", derivative)
        return result

    def _same_space(self, other: Dual) -> bool:
        return type(other) is type(self)

    def _lift(self, other: object) -> Optional[Dual]:
        if isinstance(other, Dual):
            return other if self._same_space(other) else None
        if _is_scalar(other):
            return type(self)(other)
        return None

    def _with_array(
        self,
        other: NDArray[Any],
        op: Callable[[Any, Any], Any],
        reflected: bool = False,
    ) -> NDArray[np.object_]:
        # Apply op elementwise through numpy's object loop, which calls back
        # into the scalar operators with each element
        wrapped: NDArray[np.object_] = np.empty((), dtype=object)
        wrapped[()] = self
        elements: NDArray[np.object_] = np.asarray(other, dtype=object)
        if reflected:
            return op(elements, wrapped)
        return op(wrapped, elements)

    #
    # Unary operators
    #

    def __pos__(self) -> Dual:
        return self

    def __neg__(self) -> Dual:
        return self._make(-self.value, -self.derivative)

    def __abs__(self) -> Dual:
        return self if self.value >= 0 else -self

    #
    # Arithmetic
    #
    # An ndarray operand applies the operator to each element and returns an
    # object array of duals.
    #

    @_propagate_nonfinite
    def __add__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.add)
        if isinstance(other, Dual):
            if not self._same_space(other):
                return NotImplemented
            return self._make(
                self.value + other.value, self.derivative + other.derivative
            )
        if _is_scalar(other):
            return self._make(
                self.value + self.DTYPE.type(other), self.derivative.copy()
            )
        return NotImplemented

    def __radd__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.add, reflected=True)
        return self.__add__(other)

    def __sub__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.sub)
        if isinstance(other, Dual):
            if not self._same_space(other):
                return NotImplemented
            return self + (-other)
        if _is_scalar(other):
            return self + (-self.DTYPE.type(other))
        return NotImplemented

    def __rsub__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.sub, reflected=True)
        if _is_scalar(other):
            return -self + self.DTYPE.type(other)
        return NotImplemented

    @_propagate_nonfinite
    def __mul__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.mul)
        if isinstance(other, Dual):
            if not self._same_space(other):
                return NotImplemented
            # Product rule
            return self._make(
                self.value * other.value,
                self.value * other.derivative + other.value * self.derivative,
            )
        if _is_scalar(other):
            scale: np.floating = self.DTYPE.type(other)
            return self._make(self.value * scale, self.derivative * scale)
        return NotImplemented

    def __rmul__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.mul, reflected=True)
        return self.__mul__(other)

    @_propagate_nonfinite
    def __truediv__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.truediv)
        one: np.floating = self.DTYPE.type(1)
        if isinstance(other, Dual):
            if not self._same_space(other):
                return NotImplemented
            # Quotient rule with a single reciprocal
            inv_b: np.floating = one / other.value
            return self._make(
                self.value * inv_b,
                self.derivative * inv_b
                - self.value * other.derivative * inv_b * inv_b,
            )
        if _is_scalar(other):
            return self * (one / self.DTYPE.type(other))
        return NotImplemented

    @_propagate_nonfinite
    def __rtruediv__(self, other: object) -> Any:
        if isinstance(other, np.ndarray):
            return self._with_array(other, operator.truediv, reflected=True)
        if not _is_scalar(other):
            return NotImplemented
        a: np.floating = self.DTYPE.type(other)
        inv_b: np.floating = self.DTYPE.type(1) / self.value
        return self._make(a * inv_b, (-inv_b * a * inv_b) * self.derivative)

    #
    # Comparisons
    #
    # Equality compares value and derivative. Ordering compares primal values
    # only, so duals can drive branches the way plain scalars do.
    #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dual) or not self._same_space(other):
            return NotImplemented
        return bool(
            self.value == other.value
            and np.array_equal(self.derivative, other.derivative)
        )

    def __hash__(self) -> int:
        # Adding zero folds -0.0 into 0.0 so hashing agrees with equality
        return hash(
            (type(self), self.value, (self.derivative + 0.0).tobytes())
        )

    def _primal(self, other: object) -> Any:
        if isinstance(other, Dual):
            return other.value if self._same_space(other) else NotImplemented
        if _is_scalar(other):
            return other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        primal: Any = self._primal(other)
        return primal if primal is NotImplemented else bool(self.value < primal)

    def __le__(self, other: object) -> bool:
        primal: Any = self._primal(other)
        return primal if primal is NotImplemented else bool(self.value <= primal)

    def __gt__(self, other: object) -> bool:
        primal: Any = self._primal(other)
        return primal if primal is NotImplemented else bool(self.value > primal)

    def __ge__(self, other: object) -> bool:
        primal: Any = self._primal(other)
        return primal if primal is NotImplemented else bool(self.value >= primal)

    #
    # Piecewise-constant functions
    #

    def __ceil__(self) -> Dual:
        return self.ceil()

    def __floor__(self) -> Dual:
        return self.floor()

    def ceil(self) -> Dual:
        """Ceiling of the value; the derivative is zero almost everywhere."""
        return type(self)(np.ceil(self.value))

    def floor(self) -> Dual:
        """Floor of the value; the derivative is zero almost everywhere."""
        return type(self)(np.floor(self.value))

    @_propagate_nonfinite
    def fmod(self, mod: object) -> Dual:
        """Remainder ``a - floor(a / mod) * mod`` for a constant modulus.

        Differentiating the identity with the modulus held constant leaves the
        operand's own derivative, so it is carried over unchanged.
        """
        if not _is_scalar(mod):
            raise TypeError("fmod modulus must be a plain scalar")
        m: np.floating = self.DTYPE.type(mod)
        return self._make(
            self.value - np.floor(self.value / m) * m, self.derivative.copy()
        )

    #
    # Elementary functions
    #
    # Method names follow numpy so that np.sin() and friends work on object
    # arrays of duals.
    #

    @_propagate_nonfinite
    def sqrt(self) -> Dual:
        real: np.floating = np.sqrt(self.value)
        return self._make(
            real, self.derivative * (self.DTYPE.type(1) / (self.DTYPE.type(2) * real))
        )

    @_propagate_nonfinite
    def sin(self) -> Dual:
        return self._make(np.sin(self.value), np.cos(self.value) * self.derivative)

    @_propagate_nonfinite
    def cos(self) -> Dual:
        return self._make(np.cos(self.value), -np.sin(self.value) * self.derivative)

    @_propagate_nonfinite
    def tan(self) -> Dual:
        # d/da tan(a) = 1 + tan(a)^2, reusing the primal
        real: np.floating = np.tan(self.value)
        return self._make(
            real, (self.DTYPE.type(1) + real * real) * self.derivative
        )

    @_propagate_nonfinite
    def arcsin(self) -> Dual:
        one: np.floating = self.DTYPE.type(1)
        asin_d: np.floating = one / np.sqrt(one - self.value * self.value)
        return self._make(np.arcsin(self.value), asin_d * self.derivative)

    @_propagate_nonfinite
    def arccos(self) -> Dual:
        one: np.floating = self.DTYPE.type(1)
        acos_d: np.floating = -one / np.sqrt(one - self.value * self.value)
        return self._make(np.arccos(self.value), acos_d * self.derivative)

    @_propagate_nonfinite
    def arctan(self) -> Dual:
        one: np.floating = self.DTYPE.type(1)
        atan_d: np.floating = one / (one + self.value * self.value)
        return self._make(np.arctan(self.value), atan_d * self.derivative)

    @_propagate_nonfinite
    def arctan2(self, other: object) -> Dual:
        """Quadrant-correct ``atan2(self, other)``.

        The derivative equals that of ``atan(self / other)``:

            d atan2(a, b) = (b da - a db) / (a^2 + b^2)
        """
        b: Optional[Dual] = self._lift(other)
        if b is None:
            raise TypeError(
                f"atan2 operands must share a Dual type, got {type(other).__name__}"
            )
        denom: np.floating = self.value * self.value + b.value * b.value
        return self._make(
            np.arctan2(self.value, b.value),
            (self.derivative * b.value - self.value * b.derivative) / denom,
        )

    #
    # Predicates, evaluated on the primal value only
    #

    def isnan(self) -> bool:
        return bool(np.isnan(self.value))

    def isfinite(self) -> bool:
        return bool(np.isfinite(self.value))

    def isinf(self) -> bool:
        return bool(np.isinf(self.value))


def bind(width: int, dtype: DTypeLike = np.float64) -> type[Dual]:
    """Return the Dual class for a derivative width and scalar dtype.

    Args:
        width: Number of tracked independent inputs, N >= 1
        dtype: numpy floating dtype for the value and derivative entries

    Returns:
        The cached Dual subclass for (width, dtype)

    Raises:
        ValueError: If the width is not a positive int or the dtype is not a
            floating type
    """
    if isinstance(width, bool) or not isinstance(width, numbers.Integral):
        raise ValueError("width must be an int")
    if width <= 0:
        raise ValueError("width must be positive")

    resolved: np.dtype = np.dtype(dtype)
    if not np.issubdtype(resolved, np.floating):
        raise ValueError(f"dtype must be a floating type, got {resolved}")

    key: tuple[int, np.dtype] = (int(width), resolved)
    with _BOUND_TYPES_LOCK:
        bound: Optional[type[Dual]] = _BOUND_TYPES.get(key)
        if bound is None:
            name: str = (
                f"Dual[{width}]"
                if resolved == np.float64
                else f"Dual[{width}, {resolved.name}]"
            )
            bound = type(
                name,
                (Dual,),
                {
                    "WIDTH": int(width),
                    "DTYPE": resolved,
                    "__module__": __name__,
                    "__qualname__": name,
                },
            )
            _BOUND_TYPES[key] = bound
    return bound
