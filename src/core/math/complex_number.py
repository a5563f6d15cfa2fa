"""
ComplexNumber — Комплексное число для квантовых амплитуд

Immutable Pydantic модель (frozen=True): все арифметические операции
возвращают новый экземпляр. Производные величины (magnitude, phase,
conjugate) вычисляются на лету и не хранятся.

ИНВАРИАНТЫ:
1. Компоненты — IEEE-754 float64, NaN/Inf допустимы при создании;
   is_valid_quantum_amplitude() сообщает, конечны ли обе компоненты
2. Деление и нормализация при |знаменатель|² < EPS_MACHINE → DivideByZeroError
3. Встроенный complex конвертируется только явно (as_complex, from_complex);
   вещественный скаляр допустим как операнд арифметики (через from_real)

ФОРМУЛЫ:
    (a + bi)(c + di) = (ac - bd) + (ad + bc)i
    (a + bi)/(c + di) = ((ac + bd) + (bc - ad)i) / (c² + d²)
    exp(a + bi) = e^a (cos b + i sin b)
    log(z) = ln|z| + i·arg(z)
    z^p = |z|^p · e^{i·p·arg(z)}
"""

import math
from typing import Final

from pydantic import BaseModel, Field

from src.core.math.errors import ArgumentError, DivideByZeroError, DomainError
from src.core.math.numerical_safeguards import (
    EPS_EQUALITY,
    EPS_MACHINE,
    is_close,
    is_valid_float,
    is_zero,
    validate_tolerance,
)

# Формат компоненты по умолчанию: 3.0 → "3", 0.1 → "0.1"
DEFAULT_COMPONENT_FORMAT: Final[str] = ".15g"


# =============================================================================
# COMPLEX NUMBER MODEL
# =============================================================================


class ComplexNumber(BaseModel):
    """
    Комплексное число real + imaginary·i.

    Поддерживает позиционное создание ComplexNumber(3, 4) и операторы
    + - * / (с ComplexNumber или вещественным скаляром), unary -, abs().
    Операторы делегируют именованным методам add/subtract/multiply/divide.
    """

    real: float = Field(..., description="Действительная часть")
    imaginary: float = Field(..., description="Мнимая часть")

    model_config = {"frozen": True, "strict": True}

    def __init__(self, real: float = 0.0, imaginary: float = 0.0) -> None:
        super().__init__(real=real, imaginary=imaginary)

    # -------------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_real(cls, value: float) -> "ComplexNumber":
        """Явная конверсия вещественного числа: value + 0i."""
        return cls(float(value), 0.0)

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexNumber":
        """Явная конверсия встроенного complex."""
        return cls(value.real, value.imag)

    @classmethod
    def from_polar(cls, magnitude: float, phase: float) -> "ComplexNumber":
        """
        Создание из полярной формы r·e^{iθ}.

        Examples:
            >>> ComplexNumber.from_polar(2.0, 0.0)
            ComplexNumber(real=2.0, imaginary=0.0)
        """
        return cls(magnitude * math.cos(phase), magnitude * math.sin(phase))

    @classmethod
    def from_phase(cls, phase: float) -> "ComplexNumber":
        """Фазовый множитель e^{iθ} (точка на единичной окружности)."""
        return cls(math.cos(phase), math.sin(phase))

    # -------------------------------------------------------------------------
    # Derived quantities
    # -------------------------------------------------------------------------

    @property
    def magnitude(self) -> float:
        """|z| = sqrt(real² + imaginary²)"""
        return math.sqrt(self.real * self.real + self.imaginary * self.imaginary)

    @property
    def magnitude_squared(self) -> float:
        """|z|² — вероятность для амплитуды z (без sqrt)."""
        return self.real * self.real + self.imaginary * self.imaginary

    @property
    def phase(self) -> float:
        """arg(z) = atan2(imaginary, real), диапазон (-π, π]."""
        return math.atan2(self.imaginary, self.real)

    def conjugate(self) -> "ComplexNumber":
        return ComplexNumber(self.real, -self.imaginary)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "ComplexNumber | float") -> "ComplexNumber":
        rhs = _operand(other)
        return ComplexNumber(self.real + rhs.real, self.imaginary + rhs.imaginary)

    def subtract(self, other: "ComplexNumber | float") -> "ComplexNumber":
        rhs = _operand(other)
        return ComplexNumber(self.real - rhs.real, self.imaginary - rhs.imaginary)

    def multiply(self, other: "ComplexNumber | float") -> "ComplexNumber":
        rhs = _operand(other)
        return ComplexNumber(
            self.real * rhs.real - self.imaginary * rhs.imaginary,
            self.real * rhs.imaginary + self.imaginary * rhs.real,
        )

    def divide(self, other: "ComplexNumber | float") -> "ComplexNumber":
        """
        Деление на комплексное число или вещественный скаляр.

        Raises:
            DivideByZeroError: Если |other|² < EPS_MACHINE
        """
        rhs = _operand(other)
        denominator = rhs.magnitude_squared
        if is_zero(denominator, EPS_MACHINE):
            raise DivideByZeroError(f"Cannot divide by zero complex number {rhs}")

        return ComplexNumber(
            (self.real * rhs.real + self.imaginary * rhs.imaginary) / denominator,
            (self.imaginary * rhs.real - self.real * rhs.imaginary) / denominator,
        )

    def negate(self) -> "ComplexNumber":
        return ComplexNumber(-self.real, -self.imaginary)

    # -------------------------------------------------------------------------
    # Quantum-specific
    # -------------------------------------------------------------------------

    def inner_product(self, other: "ComplexNumber") -> "ComplexNumber":
        """⟨self|other⟩ для одиночных амплитуд: conjugate(self) · other."""
        return self.conjugate().multiply(other)

    def normalize(self) -> "ComplexNumber":
        """
        Приведение к единичной величине с сохранением фазы.

        Raises:
            DivideByZeroError: Если |z|² < EPS_MACHINE
        """
        if is_zero(self.magnitude_squared, EPS_MACHINE):
            raise DivideByZeroError("Cannot normalize zero complex number")
        return self.divide(self.magnitude)

    def is_valid_quantum_amplitude(self) -> bool:
        return is_valid_float(self.real) and is_valid_float(self.imaginary)

    # -------------------------------------------------------------------------
    # Transcendental functions
    # -------------------------------------------------------------------------

    def exp(self) -> "ComplexNumber":
        scale = math.exp(self.real)
        return ComplexNumber(scale * math.cos(self.imaginary), scale * math.sin(self.imaginary))

    def log(self) -> "ComplexNumber":
        """
        Главная ветвь натурального логарифма.

        Raises:
            DomainError: log(0) не определён
        """
        magnitude = self.magnitude
        if magnitude == 0.0:
            raise DomainError("Logarithm of zero complex number is undefined")
        return ComplexNumber(math.log(magnitude), self.phase)

    def pow(self, exponent: float) -> "ComplexNumber":
        """
        Возведение в вещественную степень через полярную форму.

        Для нуля:
            0^p = 0 при p > 0
            0^0 = 1
            0^p при p < 0 → DomainError

        Examples:
            >>> ComplexNumber(0, 0).pow(0)
            ComplexNumber(real=1.0, imaginary=0.0)
        """
        if self.real == 0.0 and self.imaginary == 0.0:
            if exponent > 0:
                return ComplexNumber(0.0, 0.0)
            if exponent == 0:
                return ComplexNumber(1.0, 0.0)
            raise DomainError(f"0^{exponent} is undefined for negative exponent")

        return ComplexNumber.from_polar(self.magnitude ** exponent, self.phase * exponent)

    def sqrt(self) -> "ComplexNumber":
        return self.pow(0.5)

    # -------------------------------------------------------------------------
    # Equality and conversion
    # -------------------------------------------------------------------------

    def approx_equals(self, other: "ComplexNumber", tolerance: float = EPS_EQUALITY) -> bool:
        """
        |Δreal| < tolerance и |Δimaginary| < tolerance.

        Raises:
            ArgumentError: Если tolerance не конечный положительный
        """
        validate_tolerance(tolerance)
        return is_close(self.real, other.real, tolerance) and is_close(
            self.imaginary, other.imaginary, tolerance
        )

    def to_complex(self) -> complex:
        return complex(self.real, self.imaginary)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _operand(other).add(self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _operand(other).subtract(self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _operand(other).multiply(self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _operand(other).divide(self)

    def __neg__(self) -> "ComplexNumber":
        return self.negate()

    def __abs__(self) -> float:
        return self.magnitude

    def __pow__(self, exponent: float) -> "ComplexNumber":
        return self.pow(exponent)

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __format__(self, format_spec: str) -> str:
        """
        Строковое представление в виде a+bi.

        Особые случаи:
            imaginary == 0           → "a"
            real == 0, imaginary = 1 → "i" (и "-i" для -1)
            real == 0                → "bi"
            imaginary = ±1           → "a+i" / "a-i"
        """
        spec = format_spec or DEFAULT_COMPONENT_FORMAT
        real_text = format(self.real, spec)

        if self.imaginary == 0:
            return real_text

        if self.real == 0:
            if self.imaginary == 1:
                return "i"
            if self.imaginary == -1:
                return "-i"
            return f"{format(self.imaginary, spec)}i"

        if self.imaginary == 1:
            imaginary_text = "+i"
        elif self.imaginary == -1:
            imaginary_text = "-i"
        else:
            # знак отдельно от модуля: NaN → "a+nani"
            sign = "-" if self.imaginary < 0 else "+"
            imaginary_text = f"{sign}{format(abs(self.imaginary), spec)}i"

        return f"{real_text}{imaginary_text}"

    def __str__(self) -> str:
        return self.__format__("")


# =============================================================================
# CONSTANTS
# =============================================================================

COMPLEX_ZERO: Final[ComplexNumber] = ComplexNumber(0.0, 0.0)
COMPLEX_ONE: Final[ComplexNumber] = ComplexNumber(1.0, 0.0)
IMAGINARY_UNIT: Final[ComplexNumber] = ComplexNumber(0.0, 1.0)
NEGATIVE_IMAGINARY_UNIT: Final[ComplexNumber] = ComplexNumber(0.0, -1.0)


# =============================================================================
# CONVERSION
# =============================================================================


def _is_real_scalar(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_operand(value: object) -> bool:
    return isinstance(value, ComplexNumber) or _is_real_scalar(value)


def _operand(value: "ComplexNumber | float") -> ComplexNumber:
    if isinstance(value, ComplexNumber):
        return value
    if _is_real_scalar(value):
        return ComplexNumber.from_real(value)
    raise ArgumentError(
        f"Expected ComplexNumber or real scalar, got {type(value).__name__}"
    )


def as_complex(value: "ComplexNumber | complex | float") -> ComplexNumber:
    """
    Явная конверсия значения в ComplexNumber.

    Принимает ComplexNumber (возвращается как есть), int/float и
    встроенный complex.

    Raises:
        ArgumentError: Для любого другого типа (включая None и bool)

    Examples:
        >>> as_complex(2)
        ComplexNumber(real=2.0, imaginary=0.0)
        >>> as_complex(1 - 2j)
        ComplexNumber(real=1.0, imaginary=-2.0)
    """
    if isinstance(value, complex):
        return ComplexNumber.from_complex(value)
    return _operand(value)
