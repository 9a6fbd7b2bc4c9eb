"""
One-dimensional root finding.

``solve`` is the general entry point: Newton steps from a guess, falling
back to an expanding bracket search and Brent's method. ``brent`` runs the
last step alone on a bracket the caller already has.
"""

import logging
import math
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from .exceptions import AccrualError, ConfigurationError
from .exceptions import MaxEvaluationsExceededError, NotTradableError
from .exceptions import RootNotBracketedError

logger = logging.getLogger(__name__)

Func = Callable[[float], float]

# Default evaluation budget of ``solve``
MAX_FUNCTION_EVALUATIONS = 100

# Ratio between successive bracket expansion steps
BRACKET_GROWTH_FACTOR = 1.6

# Newton derivatives below this are treated as flat
MIN_DERIVATIVE = 1e-14

# Upper bound on Newton iterations before bracketing takes over
MAX_NEWTON_STEPS = 50


@dataclass
class RootResult:
    root: float
    iterations: int
    evaluations: int
    method: str


class _CountedObjective:
    """
    Objective wrapper enforcing the evaluation budget.

    Domain errors raised by the objective (math domain errors, overflow,
    division by zero) are reported as NaN so the caller can treat the
    point as undefined.
    """

    def __init__(self, objective, max_evaluations: int, derivative: Optional[Func] = None):
        if hasattr(objective, 'value'):
            self._value = objective.value
            if derivative is None:
                derivative = getattr(objective, 'derivative', None)
        elif callable(objective):
            self._value = objective
        else:
            raise ConfigurationError(
                f'objective must be callable or provide value(x), got {type(objective)}'
            )
        self._derivative = derivative
        self.max_evaluations = max_evaluations
        self.evaluations = 0

    @property
    def has_derivative(self) -> bool:
        return self._derivative is not None

    def __call__(self, x: float) -> float:
        self.evaluations += 1
        if self.evaluations > self.max_evaluations:
            raise MaxEvaluationsExceededError(
                f'maximum number of function evaluations ({self.max_evaluations}) exceeded'
            )
        try:
            return float(self._value(x))
        except AccrualError:
            raise
        except (ArithmeticError, ValueError):
            return math.nan

    def derivative(self, x: float) -> float:
        try:
            return float(self._derivative(x))
        except AccrualError:
            raise
        except (ArithmeticError, ValueError):
            return math.nan


def _forward_difference(f: _CountedObjective, x: float, fx: float, x_max: float) -> float:
    h = 1e-7 * max(1.0, abs(x))
    if x + h > x_max:
        h = -h
    return (f(x + h) - fx) / h


def _newton(f, x, fx, accuracy, x_min, x_max):
    """
    Newton iterations while they stay in bounds and reduce the residual.

    Returns
        (x, fx, converged, iterations)
    """
    for iteration in range(1, MAX_NEWTON_STEPS + 1):
        if f.has_derivative:
            dfx = f.derivative(x)
        else:
            dfx = _forward_difference(f, x, fx, x_max)
        if not math.isfinite(dfx) or abs(dfx) < MIN_DERIVATIVE:
            logger.debug('Flat derivative at x=%s; leaving Newton', x)
            return x, fx, False, iteration

        dx = fx / dfx
        x_new = x - dx
        if not x_min <= x_new <= x_max:
            logger.debug('Newton step to %s leaves [%s, %s]', x_new, x_min, x_max)
            return x, fx, False, iteration

        fx_new = f(x_new)
        logger.debug('Newton iter %s: x=%s f=%s', iteration, x_new, fx_new)
        if not math.isfinite(fx_new) or abs(fx_new) >= abs(fx):
            return x, fx, False, iteration

        x, fx = x_new, fx_new
        if abs(dx) < accuracy or fx == 0.0:
            return x, fx, True, iteration

    return x, fx, False, MAX_NEWTON_STEPS


@dataclass
class _Side:
    """One direction of the bracket search."""

    direction: int
    limit: float
    x: float
    fx: float
    step: float
    edge: Optional[float] = None
    pinned: bool = False

    def candidate(self, accuracy: float) -> Optional[float]:
        target = self.x + self.direction * self.step
        if self.edge is not None and (target - self.edge) * self.direction >= 0:
            # stay inside the region where the objective is defined
            if abs(self.edge - self.x) <= accuracy:
                return None
            target = 0.5 * (self.x + self.edge)
        if (target - self.limit) * self.direction >= 0:
            target = self.limit
        if target == self.x:
            return None
        return target


def _bracket(f, x, fx, step, accuracy, x_min, x_max):
    """
    Expand outward from ``x`` in both directions until the sign changes.

    Returns
        (a, b, fa, fb) with fa and fb of opposite signs (or one of them zero)
    """
    sides = (
        _Side(direction=1, limit=x_max, x=x, fx=fx, step=step),
        _Side(direction=-1, limit=x_min, x=x, fx=fx, step=step),
    )
    while not all(side.pinned for side in sides):
        for side in sides:
            if side.pinned:
                continue
            c = side.candidate(accuracy)
            if c is None:
                side.pinned = True
                continue
            fc = f(c)
            if not math.isfinite(fc):
                side.edge = c
                continue
            if fc * side.fx <= 0.0:
                logger.debug('Bracketed root in [%s, %s]', min(side.x, c), max(side.x, c))
                if side.direction > 0:
                    return side.x, c, side.fx, fc
                return c, side.x, fc, side.fx
            side.x, side.fx = c, fc
            side.step *= BRACKET_GROWTH_FACTOR
            if c == side.limit:
                side.pinned = True

    raise RootNotBracketedError(
        f'unable to bracket root in [{sides[1].x}, {sides[0].x}] '
        f'(bounds [{x_min}, {x_max}], f={fx} at {x})'
    )


def solve(
    objective,
    guess: float,
    accuracy: float = 1e-10,
    step: Optional[float] = None,
    x_min: Optional[float] = None,
    x_max: Optional[float] = None,
    max_evaluations: int = MAX_FUNCTION_EVALUATIONS,
    derivative: Optional[Func] = None,
) -> RootResult:
    """
    Find a root of a one-dimensional function near a guess.

    Newton steps are tried first (with ``derivative``, the objective's own
    ``derivative`` method, or a finite difference). When they stall, leave
    the bounds or stop reducing the residual, a bracket is grown from the
    last point by factors of BRACKET_GROWTH_FACTOR and refined with Brent.

    Args:
        objective: Callable f(x), or an object with ``value(x)`` and
            optionally ``derivative(x)``
        guess: Starting point
        accuracy: Absolute accuracy on x
        step: Initial bracket expansion step (1% of max(1, |guess|) if omitted)
        x_min: Lower bound on x
        x_max: Upper bound on x
        max_evaluations: Budget of objective evaluations
        derivative: Analytic derivative f'(x)

    Returns
        RootResult

    Raises
        NotTradableError: The objective is undefined at the guess
        RootNotBracketedError: No sign change within the bounds
        MaxEvaluationsExceededError: The budget ran out before convergence
    """
    if max_evaluations < 1:
        raise ConfigurationError(f'max_evaluations must be positive, got {max_evaluations}')
    accuracy = max(accuracy, sys.float_info.epsilon)
    lo = -math.inf if x_min is None else float(x_min)
    hi = math.inf if x_max is None else float(x_max)
    if lo >= hi:
        raise ConfigurationError(f'invalid range: x_min ({lo}) >= x_max ({hi})')
    if not lo <= guess <= hi:
        raise ConfigurationError(f'guess ({guess}) outside range [{lo}, {hi}]')
    if step is None:
        step = 0.01 * max(1.0, abs(guess))
    if step <= 0.0:
        raise ConfigurationError(f'step must be positive, got {step}')

    f = _CountedObjective(objective, max_evaluations, derivative)

    fx = f(guess)
    if not math.isfinite(fx):
        raise NotTradableError(f'objective undefined at initial guess {guess} (f={fx})')
    if fx == 0.0:
        return RootResult(guess, 0, f.evaluations, 'exact')

    x, fx, converged, iterations = _newton(f, guess, fx, accuracy, lo, hi)
    if converged:
        return RootResult(x, iterations, f.evaluations, 'newton')

    try:
        a, b, fa, fb = _bracket(f, x, fx, step, accuracy, lo, hi)
    except MaxEvaluationsExceededError as exc:
        raise RootNotBracketedError(
            f'unable to bracket root within {max_evaluations} evaluations '
            f'starting from {x}'
        ) from exc

    root, brent_iterations = _brent(f, a, b, fa, fb, accuracy, max_evaluations)
    return RootResult(root, iterations + brent_iterations, f.evaluations, 'brent')


def _brent(
    f: Func,
    a: float,
    b: float,
    fa: float,
    fb: float,
    tol: float,
    max_iter: int,
) -> tuple[float, int]:
    """
    Brent's method on a bracket [a, b] with f(a) and f(b) of opposite signs.

    Converges when the bracket around the best estimate is narrower than
    ``tol`` or the objective is exactly zero, so tiny objective values far
    from the root are not mistaken for convergence.

    Returns
        (root, iterations)
    """
    c, fc = b, fb
    d = e = b - a

    for iteration in range(max_iter):
        if (fb > 0.0 and fc > 0.0) or (fb < 0.0 and fc < 0.0):
            # keep the root between b and c
            c, fc = a, fa
            d = e = b - a
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol1 = 2.0 * sys.float_info.epsilon * abs(b) + 0.5 * tol
        xm = 0.5 * (c - b)
        if abs(xm) <= tol1 or fb == 0.0:
            return b, iteration

        if abs(e) >= tol1 and abs(fa) > abs(fb):
            s = fb / fa
            if a == c:
                # Secant method
                p = 2.0 * xm * s
                q = 1.0 - s
            else:
                # Inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * xm * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            p = abs(p)
            if 2.0 * p < min(3.0 * xm * q - abs(tol1 * q), abs(e * q)):
                e, d = d, p / q
            else:
                # Bisection
                d = e = xm
        else:
            # Bisection
            d = e = xm

        a, fa = b, fb
        b += d if abs(d) > tol1 else math.copysign(tol1, xm)
        fb = f(b)

    raise MaxEvaluationsExceededError(
        f"Brent's method did not converge in {max_iter} iterations"
    )


def brent(
    f: Func,
    a: float,
    b: float,
    tol: float = 1e-12,
    max_iter: int = 100,
) -> float:
    """
    Find a root of f in a known bracket using Brent's method.

    This is the refinement step of ``solve`` for callers that already hold
    a bracket. Convergence is judged on x only: the result is within
    ``tol`` of a sign change of f.

    Args:
        f: Function to find root of
        a: Lower bound of search interval (f(a) and f(b) must have opposite signs)
        b: Upper bound of search interval
        tol: Absolute accuracy on x
        max_iter: Maximum number of iterations

    Returns
        x such that f changes sign within tol of x

    Raises
        RootNotBracketedError: If f(a) and f(b) have the same sign
        MaxEvaluationsExceededError: If max_iter is exceeded
    """
    fa = f(a)
    fb = f(b)

    if fa * fb > 0:
        raise RootNotBracketedError(
            f'Function values at bounds must have opposite signs: '
            f'f({a})={fa}, f({b})={fb}'
        )

    return _brent(f, a, b, fa, fb, max(tol, sys.float_info.epsilon), max_iter)[0]
