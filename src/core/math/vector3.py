"""
Vector3 — Трёхмерный вещественный вектор

Immutable Pydantic модель (frozen=True) для позиций, импульсов и
моментов импульса. Все операции возвращают новый экземпляр.

ИНВАРИАНТЫ:
1. is_valid_physical_vector(): все компоненты конечны
2. is_unit: |‖v‖ - 1| < EPS_UNIT_VECTOR
3. Нормализация и деление на (почти) ноль → DomainError

ФОРМУЛЫ:
    Rodrigues: v' = v·cosθ + (k×v)·sinθ + k·(k·v)·(1 - cosθ)
    Spherical: r = ‖v‖, θ = acos(z/r) (от +Z), φ = atan2(y, x)
    Marsaglia: z = 2u - 1, φ = 2πv, ρ = sqrt(1 - z²) → (ρcosφ, ρsinφ, z)
"""

import math
import random
from collections.abc import Iterator
from typing import Final, NamedTuple

from pydantic import BaseModel, Field

from src.core.math.errors import DivideByZeroError, DomainError, IndexOutOfRangeError
from src.core.math.numerical_safeguards import (
    EPS_EQUALITY,
    EPS_MACHINE,
    EPS_UNIT_VECTOR,
    EPS_ZERO_VECTOR_SQUARED,
    clamp,
    is_close,
    is_valid_float,
    validate_tolerance,
)

DEFAULT_COMPONENT_FORMAT: Final[str] = ".15g"


# =============================================================================
# COORDINATE TUPLES
# =============================================================================


class SphericalCoordinates(NamedTuple):
    """Сферические координаты (физическая конвенция)."""

    radius: float  # r ≥ 0
    theta: float  # полярный угол от +Z, [0, π]
    phi: float  # азимут, (-π, π]


class CylindricalCoordinates(NamedTuple):
    """Цилиндрические координаты."""

    rho: float  # расстояние до оси Z
    phi: float  # азимут, (-π, π]
    z: float


# =============================================================================
# VECTOR MODEL
# =============================================================================


class Vector3(BaseModel):
    """
    Вектор (x, y, z) с векторной алгеброй и поворотами.

    Операторы + - (бинарный и унарный), * и / на скаляр делегируют
    методам add/subtract/negate/multiply/divide.
    """

    x: float = Field(..., description="Компонента X")
    y: float = Field(..., description="Компонента Y")
    z: float = Field(..., description="Компонента Z")

    model_config = {"frozen": True, "strict": True}

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        super().__init__(x=x, y=y, z=z)

    # -------------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------------

    @classmethod
    def splat(cls, value: float) -> "Vector3":
        """Вектор (value, value, value)."""
        return cls(value, value, value)

    @classmethod
    def from_spherical(cls, radius: float, theta: float, phi: float) -> "Vector3":
        """
        Создание из сферических координат.

        Args:
            radius: Длина r
            theta: Полярный угол от +Z (радианы)
            phi: Азимут от +X в плоскости XY (радианы)
        """
        sin_theta = math.sin(theta)
        return cls(
            radius * sin_theta * math.cos(phi),
            radius * sin_theta * math.sin(phi),
            radius * math.cos(theta),
        )

    @classmethod
    def from_cylindrical(cls, rho: float, phi: float, z: float) -> "Vector3":
        return cls(rho * math.cos(phi), rho * math.sin(phi), z)

    @classmethod
    def random_unit(cls, rng: random.Random) -> "Vector3":
        """
        Равномерно распределённый единичный вектор (метод Marsaglia).

        Генератор передаётся вызывающим кодом: с фиксированным seed
        результат воспроизводим, глобальное состояние random не используется.

        Args:
            rng: Источник случайности с методом random() → [0, 1)
        """
        z = 2.0 * rng.random() - 1.0
        phi = 2.0 * math.pi * rng.random()
        rho = math.sqrt(1.0 - z * z)
        return cls(rho * math.cos(phi), rho * math.sin(phi), z)

    # -------------------------------------------------------------------------
    # Derived quantities
    # -------------------------------------------------------------------------

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def is_unit(self) -> bool:
        return abs(self.magnitude - 1.0) < EPS_UNIT_VECTOR

    @property
    def is_zero(self) -> bool:
        return self.magnitude_squared < EPS_ZERO_VECTOR_SQUARED

    def normalized(self) -> "Vector3":
        """
        Единичный вектор того же направления.

        Raises:
            DomainError: Если ‖v‖ (почти) ноль
        """
        magnitude = self.magnitude
        if magnitude * magnitude < EPS_MACHINE:
            raise DomainError(f"Cannot normalize zero vector {self}")
        return self.divide(magnitude)

    def is_valid_physical_vector(self) -> bool:
        return is_valid_float(self.x) and is_valid_float(self.y) and is_valid_float(self.z)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def negate(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def multiply(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def divide(self, scalar: float) -> "Vector3":
        """
        Деление на скаляр.

        Raises:
            DivideByZeroError: Если scalar² < EPS_MACHINE (DomainError)
        """
        if scalar * scalar < EPS_MACHINE:
            raise DivideByZeroError(f"Cannot divide vector by zero scalar {scalar}")
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    # -------------------------------------------------------------------------
    # Vector algebra
    # -------------------------------------------------------------------------

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def distance_to(self, other: "Vector3") -> float:
        return self.subtract(other).magnitude

    def distance_squared_to(self, other: "Vector3") -> float:
        return self.subtract(other).magnitude_squared

    def angle_to(self, other: "Vector3") -> float:
        """
        Угол между векторами в радианах, [0, π].

        cos угла ограничивается [-1, 1] перед acos: округление может
        вывести нормированное скалярное произведение за границы.

        Raises:
            DomainError: Если один из векторов нулевой
        """
        denominator = self.magnitude * other.magnitude
        if denominator * denominator < EPS_MACHINE:
            raise DomainError("Angle with zero vector is undefined")

        cos_angle = clamp(self.dot(other) / denominator, -1.0, 1.0)
        return math.acos(cos_angle)

    def project_onto(self, onto: "Vector3") -> "Vector3":
        """
        Проекция на направление onto: onto · (v·onto / ‖onto‖²).

        Raises:
            DomainError: Если onto (почти) нулевой
        """
        onto_magnitude_squared = onto.magnitude_squared
        if onto_magnitude_squared < EPS_MACHINE:
            raise DomainError("Cannot project onto zero vector")
        return onto.multiply(self.dot(onto) / onto_magnitude_squared)

    def reflect(self, normal: "Vector3") -> "Vector3":
        """Отражение относительно плоскости с единичной нормалью normal."""
        return self.subtract(normal.multiply(2.0 * self.dot(normal)))

    def component_along(self, direction: "Vector3") -> float:
        return self.dot(direction.normalized())

    def orbital_angular_momentum(self, momentum: "Vector3") -> "Vector3":
        """L = r × p, где self — радиус-вектор."""
        return self.cross(momentum)

    def rotate_around(self, axis: "Vector3", angle: float) -> "Vector3":
        """
        Поворот вокруг произвольной оси по формуле Rodrigues.

        Ось нормализуется, если она не единичная.

        Args:
            axis: Ось вращения (ненулевая)
            angle: Угол в радианах (правило правой руки)

        Raises:
            DomainError: Если ось нулевая
        """
        if not axis.is_unit:
            axis = axis.normalized()

        cos_angle = math.cos(angle)
        sin_angle = math.sin(angle)

        return (
            self.multiply(cos_angle)
            .add(axis.cross(self).multiply(sin_angle))
            .add(axis.multiply(axis.dot(self) * (1.0 - cos_angle)))
        )

    # -------------------------------------------------------------------------
    # Coordinate conversions
    # -------------------------------------------------------------------------

    def to_spherical(self) -> SphericalCoordinates:
        """
        Конверсия в (r, θ, φ); нулевой вектор → (0, 0, 0).

        Examples:
            >>> Vector3(0, 0, 2).to_spherical()
            SphericalCoordinates(radius=2.0, theta=0.0, phi=0.0)
        """
        radius = self.magnitude
        if radius * radius < EPS_MACHINE:
            return SphericalCoordinates(0.0, 0.0, 0.0)

        theta = math.acos(clamp(self.z / radius, -1.0, 1.0))
        phi = math.atan2(self.y, self.x)
        return SphericalCoordinates(radius, theta, phi)

    def to_cylindrical(self) -> CylindricalCoordinates:
        return CylindricalCoordinates(math.hypot(self.x, self.y), math.atan2(self.y, self.x), self.z)

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]

    # -------------------------------------------------------------------------
    # Equality and access
    # -------------------------------------------------------------------------

    def approx_equals(self, other: "Vector3", tolerance: float = EPS_EQUALITY) -> bool:
        validate_tolerance(tolerance)
        return (
            is_close(self.x, other.x, tolerance)
            and is_close(self.y, other.y, tolerance)
            and is_close(self.z, other.z, tolerance)
        )

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        if index == 2:
            return self.z
        raise IndexOutOfRangeError(f"Vector3 index must be 0, 1, or 2, got {index}")

    def __iter__(self) -> Iterator[float]:
        """Компоненты x, y, z (согласовано с v[i]), а не пары (имя, значение)."""
        return iter((self.x, self.y, self.z))

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Vector3":
        return self.negate()

    def __mul__(self, scalar):
        if not _is_real_scalar(scalar):
            return NotImplemented
        return self.multiply(scalar)

    def __rmul__(self, scalar):
        if not _is_real_scalar(scalar):
            return NotImplemented
        return self.multiply(scalar)

    def __truediv__(self, scalar):
        if not _is_real_scalar(scalar):
            return NotImplemented
        return self.divide(scalar)

    def __format__(self, format_spec: str) -> str:
        spec = format_spec or DEFAULT_COMPONENT_FORMAT
        return f"({format(self.x, spec)}, {format(self.y, spec)}, {format(self.z, spec)})"

    def __str__(self) -> str:
        return self.__format__("")


def _is_real_scalar(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# CONSTANTS
# =============================================================================

VECTOR_ZERO: Final[Vector3] = Vector3(0.0, 0.0, 0.0)
UNIT_X: Final[Vector3] = Vector3(1.0, 0.0, 0.0)
UNIT_Y: Final[Vector3] = Vector3(0.0, 1.0, 0.0)
UNIT_Z: Final[Vector3] = Vector3(0.0, 0.0, 1.0)
