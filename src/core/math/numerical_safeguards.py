"""
Numerical Safeguards — Epsilon-параметры и валидация входов

Модуль задаёт численные допуски ядра и общие проверки входных данных:
- Epsilon-параметры для сравнений, нормализации и распределений
- Предикаты для float (finite, близость к нулю, сравнение с допуском)
- Валидаторы, которые сразу выбрасывают типизированные ошибки

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на (почти) ноль никогда не выполняется молча (DomainError)
2. NaN/Inf не проходят валидацию там, где требуется конечное значение
3. Все допуски можно переопределить при вызове (параметр tolerance)
4. Все операции детерминированы и воспроизводимы
"""

import math
import sys
from typing import Final

from src.core.math.errors import ArgumentError, DomainError

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Машинный epsilon float64
# Порог для делителей: |denominator|² < EPS_MACHINE → DivideByZeroError
EPS_MACHINE: Final[float] = sys.float_info.epsilon

# Допуск для approx_equals (покомпонентно, строгое сравнение <)
EPS_EQUALITY: Final[float] = 1e-10

# Допуск нормировки квантового состояния: |‖ψ‖ - 1| < EPS_NORMALIZATION
EPS_NORMALIZATION: Final[float] = 1e-10

# Допуск суммы распределения: |Σp - 1| ≤ EPS_DISTRIBUTION
EPS_DISTRIBUTION: Final[float] = 1e-10

# Вероятности ниже порога считаются нулевыми (0 · log 0 = 0)
EPS_PROBABILITY_ZERO: Final[float] = 1e-15

# Допуск единичного вектора: |‖v‖ - 1| < EPS_UNIT_VECTOR
EPS_UNIT_VECTOR: Final[float] = 1e-10

# Порог нулевого вектора по квадрату длины
EPS_ZERO_VECTOR_SQUARED: Final[float] = 1e-20


# =============================================================================
# ПРЕДИКАТЫ FLOAT
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def is_zero(value: float, tol: float = EPS_MACHINE) -> bool:
    """
    Проверка, близко ли значение к нулю.

    Args:
        value: Проверяемое значение
        tol: Порог (default: EPS_MACHINE)

    Returns:
        True если abs(value) < tol

    Examples:
        >>> is_zero(0.0)
        True
        >>> is_zero(1e-20)
        True
        >>> is_zero(1e-3)
        False
    """
    return abs(value) < tol


def is_close(a: float, b: float, tol: float = EPS_EQUALITY) -> bool:
    """
    Сравнение float с абсолютным допуском.

    Строгое неравенство: abs(a - b) < tol. Та же семантика, что у
    approx_equals для комплексных чисел, векторов и матриц.

    Examples:
        >>> is_close(1.0, 1.0 + 1e-12)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return abs(a - b) < tol


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Используется для cos угла перед acos: округление может дать 1 + 1e-16.

    Examples:
        >>> clamp(1.0000000000000002, -1.0, 1.0)
        1.0
        >>> clamp(-3.0, -1.0, 1.0)
        -1.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_real_number(value: object, name: str) -> None:
    """
    Валидация типа: int или float (bool и None отклоняются).

    Raises:
        ArgumentError: Если value не вещественное число
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgumentError(f"{name} must be a real number, got {type(value).__name__}")


def validate_finite(value: float, name: str) -> None:
    """
    Валидация, что значение конечное.

    Raises:
        DomainError: Если value NaN или Inf
    """
    if not is_valid_float(value):
        raise DomainError(f"{name} must be finite, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное и конечное.

    Raises:
        DomainError: Если value < 0 или NaN/Inf
    """
    validate_finite(value, name)

    if value < 0:
        raise DomainError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение конечное и лежит в [min_value, max_value].

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Raises:
        DomainError: Если value вне диапазона или NaN/Inf
    """
    validate_finite(value, name)

    if min_value is not None and value < min_value:
        raise DomainError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise DomainError(f"{name} must be <= {max_value}, got {value}")


def validate_tolerance(tolerance: float, name: str = "tolerance") -> None:
    """
    Валидация допуска, переданного вызывающим кодом.

    Raises:
        ArgumentError: Если tolerance не конечный или <= 0
    """
    validate_real_number(tolerance, name)
    if not is_valid_float(tolerance) or tolerance <= 0:
        raise ArgumentError(f"{name} must be a positive finite float, got {tolerance}")


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация размерностей и счётчиков.

    Raises:
        ArgumentError: Если value не int или value <= 0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"{name} must be an int, got {type(value).__name__}")

    if value <= 0:
        raise ArgumentError(f"{name} must be positive, got {value}")
