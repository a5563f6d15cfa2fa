"""
Probability — Квантовые вероятности, выборка и статистики распределений

Набор чистых функций без внутреннего состояния:
- Конверсия amplitude ↔ probability (правило Борна |ψ|²)
- Вероятности измерения состояния в базисе и симуляция измерения
- Inverse-CDF выборка дискретного исхода
- Статистики: E[X], Var[X], энтропия, KL-дивергенция, TV-расстояние
- Конструкторы распределений (uniform, normalize, deterministic)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждое распределение валидируется на входе: p_i конечны и в [0, 1],
   |Σp - 1| ≤ tolerance (default: EPS_DISTRIBUTION = 1e-10)
2. Несовпадающие длины и пустые коллекции → ArgumentError
3. Случайность только из генератора вызывающего кода (rng.random()),
   глобальное состояние random не используется: фиксированный seed
   воспроизводит последовательность исходов
4. Вероятности ≤ EPS_PROBABILITY_ZERO не вносят вклад (0 · log 0 = 0)

ФОРМУЛЫ:
    P(outcome) = |⟨outcome|ψ⟩|²
    H_b(p) = -Σ p_i · log_b(p_i)
    D_KL(p‖q) = Σ_{p_i>0} p_i · log_b(p_i / q_i)   (+∞ если q_i ≈ 0)
    TV(p, q) = ½ Σ |p_i - q_i|
    Var[X] = E[X²] - E[X]²
"""

import logging
import math
import random
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from src.core.math.complex_matrix import ComplexMatrix
from src.core.math.complex_number import ComplexNumber, as_complex
from src.core.math.errors import (
    ArgumentError,
    DomainError,
    IndexOutOfRangeError,
    InvariantViolation,
)
from src.core.math.numerical_safeguards import (
    EPS_DISTRIBUTION,
    EPS_PROBABILITY_ZERO,
    is_valid_float,
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive_int,
    validate_real_number,
    validate_tolerance,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================


class MeasurementOutcome(NamedTuple):
    """Результат симуляции проективного измерения."""

    outcome_index: int  # индекс вектора базиса, выбранного измерением
    collapsed_state: ComplexMatrix  # состояние после коллапса = basis[outcome_index]
    probability: float  # вероятность выбранного исхода


# =============================================================================
# VALIDATION
# =============================================================================


def validate_probability(probability: float, name: str = "probability") -> None:
    """
    Валидация одиночной вероятности.

    Raises:
        ArgumentError: Если probability отсутствует или не число
        DomainError: Если probability NaN/Inf или вне [0, 1]
    """
    if probability is None:
        raise ArgumentError(f"{name} is required")
    validate_real_number(probability, name)
    validate_in_range(probability, name, 0.0, 1.0)


def validate_distribution(
    probabilities: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
    name: str = "probabilities",
) -> None:
    """
    Валидация распределения вероятностей.

    Сначала проверяется каждый элемент, затем сумма.

    Args:
        probabilities: Последовательность p_i
        tolerance: Допуск суммы |Σp - 1| ≤ tolerance
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ArgumentError: Если коллекция отсутствует или пустая
        DomainError: Если p_i NaN/Inf или вне [0, 1]
        InvariantViolation: Если |Σp - 1| > tolerance
    """
    _as_distribution(probabilities, tolerance, name)


def _as_distribution(
    probabilities: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
    name: str = "probabilities",
) -> list[float]:
    """Валидация + материализация в list (итераторы читаются один раз)."""
    validate_tolerance(tolerance)
    values = _as_list(probabilities, name)

    for i, p in enumerate(values):
        validate_probability(p, f"{name}[{i}]")

    total = math.fsum(values)
    if abs(total - 1.0) > tolerance:
        raise InvariantViolation(
            f"{name} must sum to 1.0 (±{tolerance}), got sum = {total}"
        )

    return values


def _as_list(values: Iterable, name: str) -> list:
    if values is None:
        raise ArgumentError(f"{name} is required")

    result = list(values)
    if not result:
        raise ArgumentError(f"{name} cannot be empty")
    return result


def _require_same_length(left: Sequence, right: Sequence, message: str) -> None:
    if len(left) != len(right):
        raise ArgumentError(f"{message}: {len(left)} != {len(right)}")


def _log_base(base: float) -> float:
    """
    ln(base) для смены основания логарифма.

    Raises:
        DomainError: Если base не конечный, ≤ 0 или == 1
    """
    if not is_valid_float(base) or base <= 0.0 or base == 1.0:
        raise DomainError(f"Logarithm base must be finite, positive and != 1, got {base}")
    return math.log(base)


# =============================================================================
# AMPLITUDES
# =============================================================================


def from_amplitude(amplitude: ComplexNumber) -> float:
    """Правило Борна: P = |amplitude|²."""
    return as_complex(amplitude).magnitude_squared


def from_amplitudes(
    amplitudes: "Iterable[ComplexNumber] | ComplexMatrix",
    normalize: bool = True,
) -> list[float]:
    """
    Вероятности для набора амплитуд.

    Args:
        amplitudes: Амплитуды ψ_i (последовательность или вектор-столбец)
        normalize: Если True, результат делится на Σ|ψ_i|²

    Returns:
        Список |ψ_i|² (нормированный при normalize=True)

    Raises:
        ArgumentError: Если коллекция пустая или матрица не вектор-столбец
        DomainError: Если normalize=True и Σ|ψ_i|² ≈ 0

    Examples:
        >>> from_amplitudes([ComplexNumber(3, 0), ComplexNumber(0, 4)])
        [0.36, 0.64]
    """
    if isinstance(amplitudes, ComplexMatrix):
        if not amplitudes.is_vector:
            raise ArgumentError("State matrix must be a column vector")
        amplitudes = [row[0] for row in amplitudes.to_rows()]

    values = _as_list(amplitudes, "amplitudes")
    probabilities = [from_amplitude(amplitude) for amplitude in values]

    if not normalize:
        return probabilities

    total = math.fsum(probabilities)
    if total < EPS_PROBABILITY_ZERO:
        raise DomainError("Cannot normalize zero probability distribution")

    if total != 1.0:
        logger.debug("Renormalizing amplitude probabilities: sum=%r", total)
    return [p / total for p in probabilities]


def to_amplitude(probability: float, phase: float = 0.0) -> ComplexNumber:
    """
    Амплитуда √p · e^{i·phase}.

    Raises:
        DomainError: Если probability вне [0, 1] или phase не конечная
    """
    validate_probability(probability)
    validate_finite(phase, "phase")
    return ComplexNumber.from_polar(math.sqrt(probability), phase)


# =============================================================================
# MEASUREMENT
# =============================================================================


def measurement_probability(state: ComplexMatrix, outcome: ComplexMatrix) -> float:
    """
    Вероятность исхода: |⟨outcome|state⟩|².

    Raises:
        ArgumentError: Если аргументы не векторы-столбцы или размерности
            не совпадают
    """
    if not isinstance(state, ComplexMatrix) or not isinstance(outcome, ComplexMatrix):
        raise ArgumentError("State and outcome must be ComplexMatrix vectors")

    if not state.is_vector or not outcome.is_vector:
        raise ArgumentError("Both state and outcome must be column vectors")

    if state.rows != outcome.rows:
        raise ArgumentError(
            f"State and outcome vectors must have the same dimension: "
            f"{state.rows} != {outcome.rows}"
        )

    return from_amplitude(outcome.inner_product(state))


def measurement_probabilities(
    state: ComplexMatrix, basis: Iterable[ComplexMatrix]
) -> list[float]:
    """
    Вероятности всех исходов измерения в базисе basis.

    Raises:
        ArgumentError: Если state отсутствует, базис пустой или вектор
            базиса несовместим с state
    """
    if state is None:
        raise ArgumentError("state is required")

    basis_vectors = _as_list(basis, "basis")
    return [measurement_probability(state, outcome) for outcome in basis_vectors]


def quantum_measurement(
    state: ComplexMatrix,
    basis: Iterable[ComplexMatrix],
    rng: random.Random,
    tolerance: float = EPS_DISTRIBUTION,
) -> MeasurementOutcome:
    """
    Симуляция проективного измерения состояния в базисе.

    1. P_i = |⟨basis_i|state⟩|²
    2. Inverse-CDF выборка индекса i по P
    3. Коллапс: новое состояние = basis_i

    Args:
        state: Нормированный вектор состояния
        basis: Ортонормированный полный базис той же размерности
        rng: Генератор случайных чисел вызывающего кода
        tolerance: Допуск полноты |ΣP_i - 1|

    Returns:
        MeasurementOutcome(outcome_index, collapsed_state, probability)

    Raises:
        ArgumentError: Если аргументы отсутствуют или несовместимы
        InvariantViolation: Если ΣP_i ≠ 1 (state не нормирован или базис неполный)
    """
    if rng is None:
        raise ArgumentError("rng is required")

    basis_vectors = _as_list(basis, "basis")
    probabilities = measurement_probabilities(state, basis_vectors)

    outcome_index = sample_discrete(probabilities, rng, tolerance=tolerance)
    probability = probabilities[outcome_index]

    logger.debug(
        "Quantum measurement: outcome=%d probability=%.6f basis_size=%d",
        outcome_index,
        probability,
        len(basis_vectors),
    )

    return MeasurementOutcome(
        outcome_index=outcome_index,
        collapsed_state=basis_vectors[outcome_index],
        probability=probability,
    )


# =============================================================================
# STATISTICS
# =============================================================================


def expected_value(
    values: Iterable[float],
    probabilities: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """
    E[X] = Σ x_i · p_i

    Raises:
        ArgumentError: Если коллекции пустые или разной длины
        DomainError / InvariantViolation: Если probabilities не распределение
    """
    value_list = _as_list(values, "values")
    probability_list = _as_list(probabilities, "probabilities")
    _require_same_length(
        value_list, probability_list, "Values and probabilities must have the same length"
    )

    distribution = _as_distribution(probability_list, tolerance)
    return math.fsum(x * p for x, p in zip(value_list, distribution))


def variance(
    values: Iterable[float],
    probabilities: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """Var[X] = E[X²] - E[X]²"""
    value_list = _as_list(values, "values")
    probability_list = _as_list(probabilities, "probabilities")

    mean = expected_value(value_list, probability_list, tolerance)
    mean_square = expected_value([x * x for x in value_list], probability_list, tolerance)
    return mean_square - mean * mean


def standard_deviation(
    values: Iterable[float],
    probabilities: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    # E[X²] - E[X]² может уйти в -1e-17 на вырожденном распределении
    return math.sqrt(max(variance(values, probabilities, tolerance), 0.0))


def entropy(
    probabilities: Iterable[float],
    base: float = 2.0,
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """
    Энтропия Шеннона H_b(p) = -Σ p_i · log_b(p_i).

    Вероятности ≤ EPS_PROBABILITY_ZERO пропускаются (0 · log 0 = 0).

    Args:
        probabilities: Распределение
        base: Основание логарифма (default: 2 → биты)
        tolerance: Допуск суммы распределения

    Returns:
        H ≥ 0; максимум log_b(n) достигается на uniform(n)

    Examples:
        >>> entropy([0.5, 0.5])
        1.0
        >>> entropy(deterministic(4, 2))
        0.0
    """
    distribution = _as_distribution(probabilities, tolerance)
    log_base = _log_base(base)

    result = 0.0
    for p in distribution:
        if p > EPS_PROBABILITY_ZERO:
            result -= p * math.log(p) / log_base

    return result


def von_neumann_entropy(
    eigenvalues: Iterable[float],
    base: float = 2.0,
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """
    Энтропия фон Неймана S(ρ) = -Σ λ_i · log_b(λ_i).

    Собственные значения матрицы плотности передаются вызывающим кодом:
    спектральное разложение здесь не выполняется. Спектр ρ обязан
    образовывать распределение (ρ ≥ 0, Tr ρ = 1).
    """
    return entropy(eigenvalues, base=base, tolerance=tolerance)


def kullback_leibler_divergence(
    p: Iterable[float],
    q: Iterable[float],
    base: float = math.e,
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """
    D_KL(p‖q) = Σ_{p_i > 0} p_i · log_b(p_i / q_i).

    Несимметрична: D_KL(p‖q) ≠ D_KL(q‖p) в общем случае.

    Returns:
        D_KL ≥ 0; +inf если для некоторого p_i > 0 выполнено q_i ≈ 0;
        0 при p == q

    Raises:
        ArgumentError: Если длины распределений различаются
    """
    p_list = _as_list(p, "p")
    q_list = _as_list(q, "q")
    _require_same_length(p_list, q_list, "Probability distributions must have the same length")

    p_dist = _as_distribution(p_list, tolerance, "p")
    q_dist = _as_distribution(q_list, tolerance, "q")
    log_base = _log_base(base)

    divergence = 0.0
    for p_i, q_i in zip(p_dist, q_dist):
        if p_i > EPS_PROBABILITY_ZERO:
            if q_i < EPS_PROBABILITY_ZERO:
                return math.inf
            divergence += p_i * math.log(p_i / q_i) / log_base

    return divergence


def total_variation_distance(
    p: Iterable[float],
    q: Iterable[float],
    tolerance: float = EPS_DISTRIBUTION,
) -> float:
    """TV(p, q) = ½ Σ |p_i - q_i|, значение в [0, 1]."""
    p_list = _as_list(p, "p")
    q_list = _as_list(q, "q")
    _require_same_length(p_list, q_list, "Probability distributions must have the same length")

    p_dist = _as_distribution(p_list, tolerance, "p")
    q_dist = _as_distribution(q_list, tolerance, "q")

    return 0.5 * math.fsum(abs(p_i - q_i) for p_i, q_i in zip(p_dist, q_dist))


# =============================================================================
# SAMPLING
# =============================================================================


def _draw_index(distribution: list[float], rng: random.Random) -> int:
    u = rng.random()
    cumulative = 0.0

    for i, p in enumerate(distribution):
        cumulative += p
        if cumulative >= u:
            return i

    # Округление не дало кумулятивной сумме достичь u
    return len(distribution) - 1


def sample_discrete(
    probabilities: Iterable[float],
    rng: random.Random,
    tolerance: float = EPS_DISTRIBUTION,
) -> int:
    """
    Inverse-CDF выборка одного индекса.

    u ~ Uniform[0, 1) из rng; возвращается первый индекс, на котором
    кумулятивная сумма ≥ u, иначе последний индекс.

    Args:
        probabilities: Распределение
        rng: Генератор вызывающего кода (random.Random или совместимый)
        tolerance: Допуск суммы распределения

    Returns:
        Индекс исхода в [0, len(probabilities))
    """
    if rng is None:
        raise ArgumentError("rng is required")

    distribution = _as_distribution(probabilities, tolerance)
    return _draw_index(distribution, rng)


def sample_discrete_many(
    probabilities: Iterable[float],
    count: int,
    rng: random.Random,
    tolerance: float = EPS_DISTRIBUTION,
) -> list[int]:
    """
    count независимых выборок из одного распределения.

    Raises:
        ArgumentError: Если count < 0 или rng отсутствует
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise ArgumentError(f"count must be an int, got {type(count).__name__}")
    if count < 0:
        raise ArgumentError(f"count must be non-negative, got {count}")
    if rng is None:
        raise ArgumentError("rng is required")

    distribution = _as_distribution(probabilities, tolerance)
    return [_draw_index(distribution, rng) for _ in range(count)]


# =============================================================================
# DISTRIBUTIONS
# =============================================================================


def uniform(count: int) -> list[float]:
    """
    Равномерное распределение на count исходах.

    Examples:
        >>> uniform(4)
        [0.25, 0.25, 0.25, 0.25]
    """
    validate_positive_int(count, "count")
    return [1.0 / count] * count


def normalize(weights: Iterable[float]) -> list[float]:
    """
    Нормировка неотрицательных весов в распределение.

    Raises:
        ArgumentError: Если weights пустой
        DomainError: Если вес отрицательный / NaN / Inf или Σw ≈ 0

    Examples:
        >>> normalize([1.0, 3.0])
        [0.25, 0.75]
    """
    weight_list = _as_list(weights, "weights")

    for i, weight in enumerate(weight_list):
        validate_non_negative(weight, f"weights[{i}]")

    total = math.fsum(weight_list)
    if total < EPS_PROBABILITY_ZERO:
        raise DomainError(f"Sum of weights must be positive, got {total}")

    return [weight / total for weight in weight_list]


def deterministic(count: int, certain_index: int) -> list[float]:
    """
    One-hot распределение: исход certain_index с вероятностью 1.

    Raises:
        ArgumentError: Если count ≤ 0 или certain_index вне [0, count)
    """
    validate_positive_int(count, "count")
    if not 0 <= certain_index < count:
        raise IndexOutOfRangeError(
            f"certain_index must be in range [0, {count - 1}], got {certain_index}"
        )

    probabilities = [0.0] * count
    probabilities[certain_index] = 1.0
    return probabilities
