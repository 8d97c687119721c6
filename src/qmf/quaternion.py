"""
Quaternion Algebra for the Memory Field

Every memory in the field is a point on the unit 3-sphere S³ ⊂ R⁴. This module
provides the algebra used to build, compare and move between those points.

Mathematical Framework:
----------------------
A quaternion q = w + xi + yj + zk carries four labelled components:

    w: coherence     x: security     y: performance     z: usability

Hamilton product (non-commutative):
    (a·b).w = aw·bw − ax·bx − ay·by − az·bz
    (a·b).x = aw·bx + ax·bw + ay·bz − az·by
    (a·b).y = aw·by − ax·bz + ay·bw + az·bx
    (a·b).z = aw·bz + ax·by − ay·bx + az·bw

Commutator:
    [a, b] = a·b − b·a      (zero only when a and b are aligned)

SLERP (shortest arc):
    q(t) = s0·a + s1·b',   b' = ±b so that <a, b'> ≥ 0
    s0 = cos(θ) − d·sin(θ)/sin(θ0),  s1 = sin(θ)/sin(θ0),  θ = θ0·t

Stereographic projection (display only):
    (x, y, z) / (1 − w)

Edge Cases:
----------
- normalize() of the zero vector returns the identity (1, 0, 0, 0)
- slerp() falls back to normalized lerp when the inputs are near-parallel
- stereographic_project() returns (10x, 10y, 10z) near the pole w → 1

Malformed input (non-finite components, wrong dimension, t outside [0, 1])
raises InvalidInputError instead of leaking NaN into the field.
"""

import math
import numbers
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np


# Corrected dot above which SLERP switches to normalized linear interpolation
SLERP_LINEAR_THRESHOLD = 0.9995

# |1 − w| below which the stereographic projection is treated as singular
PROJECTION_POLE_EPS = 0.001

# Scale applied to (x, y, z) when projecting from the pole
PROJECTION_POLE_SCALE = 10.0

# Commutator magnitude below which a pair is classified as commutative
COMMUTATIVE_TOLERANCE = 0.01


class InvalidInputError(ValueError):
    """Raised when a value handed to the field has the wrong shape or is not finite."""


def _finite(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a real number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class Quaternion:
    """
    Immutable 4-component hypercomplex value.

    Attributes:
        w: Coherence (scalar part)
        x: Security
        y: Performance
        z: Usability
    """
    w: float
    x: float
    y: float
    z: float

    def __post_init__(self):
        for name in ("w", "x", "y", "z"):
            object.__setattr__(self, name, _finite(getattr(self, name), name))

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> "Quaternion":
        """Build from any 4-element sequence or array; other lengths are rejected."""
        try:
            comps = list(values)
        except TypeError:
            raise InvalidInputError("quaternion components must be iterable") from None
        if len(comps) != 4:
            raise InvalidInputError(f"quaternion needs 4 components, got {len(comps)}")
        return cls(*comps)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.w, self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array(self.as_tuple(), dtype=np.float64)

    def __neg__(self) -> "Quaternion":
        return Quaternion(-self.w, -self.x, -self.y, -self.z)


IDENTITY = Quaternion(1.0, 0.0, 0.0, 0.0)


def _require(q, name: str = "quaternion") -> Quaternion:
    if not isinstance(q, Quaternion):
        raise InvalidInputError(f"{name} must be a Quaternion, got {type(q).__name__}")
    return q


def create_quaternion(w: float, x: float, y: float, z: float) -> Quaternion:
    return Quaternion(w, x, y, z)


def magnitude(q: Quaternion) -> float:
    """Euclidean norm sqrt(w² + x² + y² + z²), without intermediate overflow or underflow."""
    q = _require(q)
    return math.hypot(q.w, q.x, q.y, q.z)


def normalize(q: Quaternion) -> Quaternion:
    """
    Scale to unit length.

    The zero vector has no direction, so it maps to the identity
    quaternion (1, 0, 0, 0) rather than raising.
    """
    q = _require(q)
    scale = max(abs(q.w), abs(q.x), abs(q.y), abs(q.z))
    if scale == 0:
        return IDENTITY
    # Largest component becomes ±1 so the norm cannot overflow near the float maximum
    q = Quaternion(q.w / scale, q.x / scale, q.y / scale, q.z / scale)
    mag = magnitude(q)
    return Quaternion(q.w / mag, q.x / mag, q.y / mag, q.z / mag)


def hamilton_product(a: Quaternion, b: Quaternion) -> Quaternion:
    """
    Non-commutative quaternion multiplication, normalized back onto S³.

    Args:
        a: Left operand
        b: Right operand

    Returns:
        Unit quaternion a·b. In general a·b ≠ b·a.
    """
    a = _require(a, "a")
    b = _require(b, "b")
    return normalize(Quaternion(
        a.w * b.w - a.x * b.x - a.y * b.y - a.z * b.z,
        a.w * b.x + a.x * b.w + a.y * b.z - a.z * b.y,
        a.w * b.y - a.x * b.z + a.y * b.w + a.z * b.x,
        a.w * b.z + a.x * b.y - a.y * b.x + a.z * b.w,
    ))


def commutator(a: Quaternion, b: Quaternion) -> Quaternion:
    """[a, b] = a·b − b·a, componentwise and not renormalized."""
    ab = hamilton_product(a, b)
    ba = hamilton_product(b, a)
    return Quaternion(ab.w - ba.w, ab.x - ba.x, ab.y - ba.y, ab.z - ba.z)


def is_commutative(a: Quaternion, b: Quaternion, tolerance: float = COMMUTATIVE_TOLERANCE) -> bool:
    return magnitude(commutator(a, b)) < tolerance


def dot(a: Quaternion, b: Quaternion) -> float:
    a = _require(a, "a")
    b = _require(b, "b")
    return a.w * b.w + a.x * b.x + a.y * b.y + a.z * b.z


def slerp(a: Quaternion, b: Quaternion, t: float) -> Quaternion:
    """
    Spherical linear interpolation along the shorter great-circle arc.

    q and −q are the same orientation, so when <a, b> < 0 the end point is
    flipped before interpolating. Near-parallel inputs (corrected dot above
    0.9995) use normalized lerp, where sin(θ0) would underflow.

    Args:
        a: Start quaternion (returned at t=0)
        b: End quaternion (returned at t=1, up to sign)
        t: Interpolation parameter in [0, 1]

    Returns:
        Unit quaternion on the arc between a and b

    Raises:
        InvalidInputError: t is not finite or lies outside [0, 1]
    """
    t = _finite(t, "t")
    if t < 0.0 or t > 1.0:
        raise InvalidInputError(f"t must lie in [0, 1], got {t}")

    d = dot(a, b)
    if d < 0:
        d = -d
        b = -b

    if d > SLERP_LINEAR_THRESHOLD:
        return normalize(Quaternion(
            a.w + t * (b.w - a.w),
            a.x + t * (b.x - a.x),
            a.y + t * (b.y - a.y),
            a.z + t * (b.z - a.z),
        ))

    theta0 = math.acos(d)
    theta = theta0 * t
    sin_theta = math.sin(theta)
    sin_theta0 = math.sin(theta0)

    s0 = math.cos(theta) - d * sin_theta / sin_theta0
    s1 = sin_theta / sin_theta0

    return normalize(Quaternion(
        s0 * a.w + s1 * b.w,
        s0 * a.x + s1 * b.x,
        s0 * a.y + s1 * b.y,
        s0 * a.z + s1 * b.z,
    ))


def slerp_path(a: Quaternion, b: Quaternion, steps: int = 50) -> List[Quaternion]:
    """Sample steps+1 evenly spaced points of slerp(a, b, t) for t in [0, 1]."""
    if isinstance(steps, bool) or not isinstance(steps, numbers.Integral) or steps < 1:
        raise InvalidInputError(f"steps must be a positive integer, got {steps!r}")
    return [slerp(a, b, i / steps) for i in range(steps + 1)]


def stereographic_project(q: Quaternion) -> Tuple[float, float, float]:
    """
    Project S³ into R³ for display.

    At the pole (w → 1) the projection diverges, so a bounded
    (10x, 10y, 10z) stand-in is returned instead.
    """
    q = _require(q)
    denom = 1.0 - q.w
    if abs(denom) < PROJECTION_POLE_EPS:
        return (
            q.x * PROJECTION_POLE_SCALE,
            q.y * PROJECTION_POLE_SCALE,
            q.z * PROJECTION_POLE_SCALE,
        )
    return (q.x / denom, q.y / denom, q.z / denom)


project_3d = stereographic_project


def random_quaternion(rng: Optional[random.Random] = None) -> Quaternion:
    """
    Uniformly distributed unit quaternion (Shoemake's subgroup algorithm).

    Args:
        rng: Random source; defaults to the module-level generator. Pass a
            seeded random.Random for reproducible fields.
    """
    rng = rng if rng is not None else random
    u1 = rng.random()
    u2 = rng.random()
    u3 = rng.random()

    return normalize(Quaternion(
        math.sqrt(1 - u1) * math.sin(2 * math.pi * u2),
        math.sqrt(1 - u1) * math.cos(2 * math.pi * u2),
        math.sqrt(u1) * math.sin(2 * math.pi * u3),
        math.sqrt(u1) * math.cos(2 * math.pi * u3),
    ))
