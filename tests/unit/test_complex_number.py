"""
Тесты для ComplexNumber

Проверяет:
1. Арифметику complex-complex и complex-scalar
2. Производные величины (magnitude, phase, conjugate)
3. Полярную форму и трансцендентные функции
4. Деление/нормализацию на ноль (DivideByZeroError)
5. Immutability (frozen=True)
6. Точное и приближённое равенство
7. Строковое представление
"""

import math

import pytest
from pydantic import ValidationError

from src.core.math.complex_number import (
    COMPLEX_ONE,
    COMPLEX_ZERO,
    IMAGINARY_UNIT,
    NEGATIVE_IMAGINARY_UNIT,
    ComplexNumber,
    as_complex,
)
from src.core.math.errors import ArgumentError, DivideByZeroError, DomainError


@pytest.fixture
def z1() -> ComplexNumber:
    """3 + 4i"""
    return ComplexNumber(3, 4)


@pytest.fixture
def z2() -> ComplexNumber:
    """1 - 2i"""
    return ComplexNumber(1, -2)


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Тесты создания ComplexNumber"""

    def test_positional_and_keyword(self) -> None:
        """Позиционные и именованные аргументы эквивалентны"""
        assert ComplexNumber(1.5, -2.0) == ComplexNumber(real=1.5, imaginary=-2.0)

    def test_int_components_stored_as_float(self) -> None:
        z = ComplexNumber(3, 4)
        assert z.real == 3.0
        assert isinstance(z.real, float)

    def test_default_is_zero(self) -> None:
        assert ComplexNumber() == COMPLEX_ZERO

    def test_invalid_component_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ComplexNumber("3", 4)

    def test_immutable(self, z1: ComplexNumber) -> None:
        """Модель frozen: присваивание запрещено"""
        with pytest.raises(ValidationError):
            z1.real = 10.0

    def test_constants(self) -> None:
        assert COMPLEX_ZERO == ComplexNumber(0, 0)
        assert COMPLEX_ONE == ComplexNumber(1, 0)
        assert IMAGINARY_UNIT == ComplexNumber(0, 1)
        assert NEGATIVE_IMAGINARY_UNIT == ComplexNumber(0, -1)

    def test_hashable(self, z1: ComplexNumber) -> None:
        assert hash(z1) == hash(ComplexNumber(3.0, 4.0))
        assert len({z1, ComplexNumber(3, 4)}) == 1


class TestConversion:
    """Тесты явной конверсии"""

    def test_from_real(self) -> None:
        assert ComplexNumber.from_real(2) == ComplexNumber(2.0, 0.0)

    def test_from_complex_and_back(self) -> None:
        z = ComplexNumber.from_complex(1 - 2j)
        assert z == ComplexNumber(1, -2)
        assert z.to_complex() == 1 - 2j

    def test_as_complex(self, z1: ComplexNumber) -> None:
        assert as_complex(z1) is z1
        assert as_complex(5) == ComplexNumber(5, 0)
        assert as_complex(0.5) == ComplexNumber(0.5, 0)
        assert as_complex(2j) == ComplexNumber(0, 2)

    def test_as_complex_rejects_other_types(self) -> None:
        for bad in (None, "1", True, [1, 2]):
            with pytest.raises(ArgumentError):
                as_complex(bad)


# =============================================================================
# ARITHMETIC
# =============================================================================


class TestArithmetic:
    """Тесты арифметических операций"""

    def test_reference_scenario(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        """(3+4i) + (1-2i) = 4+2i, (3+4i)(1-2i) = 11-2i, |3+4i| = 5"""
        assert z1 + z2 == ComplexNumber(4, 2)
        assert z1 * z2 == ComplexNumber(11, -2)
        assert z1.magnitude == 5.0

    def test_named_methods_match_operators(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        assert z1.add(z2) == z1 + z2
        assert z1.subtract(z2) == z1 - z2
        assert z1.multiply(z2) == z1 * z2
        assert z1.divide(z2) == z1 / z2
        assert z1.negate() == -z1

    def test_subtract(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        assert z1 - z2 == ComplexNumber(2, 6)

    def test_divide(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        """(3+4i)/(1-2i) = (-5+10i)/5 = -1+2i"""
        assert (z1 / z2).approx_equals(ComplexNumber(-1, 2))

    def test_divide_then_multiply_roundtrip(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        assert ((z1 / z2) * z2).approx_equals(z1)

    def test_scalar_operations(self, z1: ComplexNumber) -> None:
        """Операции с вещественным скаляром с обеих сторон"""
        assert z1 * 2 == ComplexNumber(6, 8)
        assert 2 * z1 == ComplexNumber(6, 8)
        assert z1 / 2 == ComplexNumber(1.5, 2)
        assert z1 + 1 == ComplexNumber(4, 4)
        assert 1 - z1 == ComplexNumber(-2, -4)

    def test_reverse_scalar_division(self) -> None:
        """1 / i = -i"""
        assert (1 / IMAGINARY_UNIT).approx_equals(NEGATIVE_IMAGINARY_UNIT)

    def test_additive_inverse(self, z1: ComplexNumber) -> None:
        """z + (-z) = 0"""
        assert z1 + (-z1) == COMPLEX_ZERO

    def test_unsupported_operand(self, z1: ComplexNumber) -> None:
        with pytest.raises(TypeError):
            z1 + "a"

    def test_operands_not_mutated(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        _ = z1 * z2
        assert z1 == ComplexNumber(3, 4)
        assert z2 == ComplexNumber(1, -2)


class TestDivisionByZero:
    """Тесты деления на ноль"""

    def test_divide_by_zero_complex(self, z1: ComplexNumber) -> None:
        with pytest.raises(DivideByZeroError, match="zero"):
            z1 / COMPLEX_ZERO

    def test_divide_by_zero_scalar(self, z1: ComplexNumber) -> None:
        with pytest.raises(DivideByZeroError):
            z1 / 0.0

    def test_divide_by_tiny_denominator(self, z1: ComplexNumber) -> None:
        """|d|² ниже машинного epsilon → ошибка"""
        with pytest.raises(DivideByZeroError):
            z1.divide(ComplexNumber(1e-9, 0))

    def test_divide_by_zero_is_domain_and_zero_division(self, z1: ComplexNumber) -> None:
        with pytest.raises(DomainError):
            z1 / COMPLEX_ZERO
        with pytest.raises(ZeroDivisionError):
            z1 / COMPLEX_ZERO


# =============================================================================
# DERIVED QUANTITIES
# =============================================================================


class TestDerivedQuantities:
    """Тесты magnitude, phase, conjugate"""

    def test_magnitude_squared(self, z1: ComplexNumber) -> None:
        assert z1.magnitude_squared == 25.0
        assert abs(z1) == 5.0

    def test_conjugate(self, z1: ComplexNumber) -> None:
        assert z1.conjugate() == ComplexNumber(3, -4)

    def test_z_times_conjugate_is_magnitude_squared(self, z1: ComplexNumber) -> None:
        """z · conj(z) = |z|² (вещественное)"""
        product = z1 * z1.conjugate()
        assert product == ComplexNumber(z1.magnitude_squared, 0.0)

    def test_phase_range(self) -> None:
        """phase в (-π, π]"""
        assert ComplexNumber(1, 0).phase == 0.0
        assert ComplexNumber(0, 1).phase == pytest.approx(math.pi / 2)
        assert ComplexNumber(-1, 0).phase == pytest.approx(math.pi)
        assert ComplexNumber(0, -1).phase == pytest.approx(-math.pi / 2)

    def test_valid_quantum_amplitude(self, z1: ComplexNumber) -> None:
        assert z1.is_valid_quantum_amplitude()
        assert not ComplexNumber(float("nan"), 0).is_valid_quantum_amplitude()
        assert not ComplexNumber(0, float("inf")).is_valid_quantum_amplitude()


# =============================================================================
# POLAR FORM AND FUNCTIONS
# =============================================================================


class TestPolarForm:
    """Тесты полярной формы"""

    @pytest.mark.parametrize(
        "z",
        [
            ComplexNumber(3, 4),
            ComplexNumber(-1, 2),
            ComplexNumber(-2, -0.5),
            ComplexNumber(0, -7),
        ],
    )
    def test_polar_roundtrip(self, z: ComplexNumber) -> None:
        """from_polar(|z|, arg z) ≈ z"""
        assert ComplexNumber.from_polar(z.magnitude, z.phase).approx_equals(z)

    def test_from_phase_is_unit(self) -> None:
        z = ComplexNumber.from_phase(0.7)
        assert z.magnitude == pytest.approx(1.0)
        assert z.phase == pytest.approx(0.7)

    def test_from_phase_pi_over_two(self) -> None:
        assert ComplexNumber.from_phase(math.pi / 2).approx_equals(IMAGINARY_UNIT)


class TestFunctions:
    """Тесты exp, log, pow, sqrt"""

    def test_euler_identity(self) -> None:
        """e^{iπ} = -1"""
        assert ComplexNumber(0, math.pi).exp().approx_equals(ComplexNumber(-1, 0))

    def test_exp_log_roundtrip(self, z1: ComplexNumber) -> None:
        assert z1.log().exp().approx_equals(z1)

    def test_log_of_zero_raises(self) -> None:
        with pytest.raises(DomainError):
            COMPLEX_ZERO.log()

    def test_sqrt_of_minus_one(self) -> None:
        assert ComplexNumber(-1, 0).sqrt().approx_equals(IMAGINARY_UNIT)

    def test_pow_integer(self, z1: ComplexNumber) -> None:
        """(3+4i)² = -7+24i"""
        assert z1.pow(2).approx_equals(ComplexNumber(-7, 24), tolerance=1e-9)
        assert (z1 ** 2).approx_equals(z1 * z1, tolerance=1e-9)

    def test_pow_of_zero(self) -> None:
        """0^p: 0 для p > 0, 1 для p == 0, ошибка для p < 0"""
        assert COMPLEX_ZERO.pow(2.5) == COMPLEX_ZERO
        assert COMPLEX_ZERO.pow(0) == COMPLEX_ONE
        with pytest.raises(DomainError, match="negative exponent"):
            COMPLEX_ZERO.pow(-1)


# =============================================================================
# QUANTUM-SPECIFIC
# =============================================================================


class TestQuantumOperations:
    """Тесты inner_product и normalize"""

    def test_inner_product(self, z1: ComplexNumber, z2: ComplexNumber) -> None:
        """⟨z1|z2⟩ = conj(z1)·z2 = (3-4i)(1-2i) = -5-10i"""
        assert z1.inner_product(z2) == ComplexNumber(-5, -10)

    def test_inner_product_with_self_is_magnitude_squared(self, z1: ComplexNumber) -> None:
        assert z1.inner_product(z1) == ComplexNumber(25, 0)

    def test_normalize(self, z1: ComplexNumber) -> None:
        normalized = z1.normalize()
        assert normalized.approx_equals(ComplexNumber(0.6, 0.8))
        assert normalized.magnitude == pytest.approx(1.0)

    def test_normalize_zero_raises(self) -> None:
        with pytest.raises(DivideByZeroError, match="normalize"):
            COMPLEX_ZERO.normalize()


# =============================================================================
# EQUALITY
# =============================================================================


class TestEquality:
    """Тесты точного и приближённого равенства"""

    def test_exact_equality(self) -> None:
        assert ComplexNumber(0.1, 0.2) == ComplexNumber(0.1, 0.2)
        assert ComplexNumber(0.1 + 0.2, 0) != ComplexNumber(0.3, 0)

    def test_approx_equality(self) -> None:
        assert ComplexNumber(0.1 + 0.2, 0).approx_equals(ComplexNumber(0.3, 0))
        assert not ComplexNumber(1, 0).approx_equals(ComplexNumber(1, 1e-9))

    def test_approx_equality_custom_tolerance(self) -> None:
        assert ComplexNumber(1, 0).approx_equals(ComplexNumber(1.05, 0), tolerance=0.1)

    def test_approx_equality_is_strict(self) -> None:
        assert not ComplexNumber(0, 0).approx_equals(ComplexNumber(0.5, 0), tolerance=0.5)

    @pytest.mark.parametrize("tolerance", [-1.0, 0.0, float("nan"), float("inf"), None])
    def test_invalid_tolerance_rejected(self, tolerance: object) -> None:
        """Некорректный допуск → ArgumentError, а не молчаливый False"""
        z = ComplexNumber(3, 4)
        with pytest.raises(ArgumentError, match="tolerance"):
            z.approx_equals(z, tolerance)


# =============================================================================
# STRING REPRESENTATION
# =============================================================================


class TestStringRepresentation:
    """Тесты __str__ / __format__"""

    @pytest.mark.parametrize(
        "z, expected",
        [
            (ComplexNumber(3, 4), "3+4i"),
            (ComplexNumber(1, -2), "1-2i"),
            (ComplexNumber(2, 0), "2"),
            (ComplexNumber(-2.5, 0), "-2.5"),
            (ComplexNumber(0, 1), "i"),
            (ComplexNumber(0, -1), "-i"),
            (ComplexNumber(0, 3), "3i"),
            (ComplexNumber(2, 1), "2+i"),
            (ComplexNumber(2, -1), "2-i"),
        ],
    )
    def test_str(self, z: ComplexNumber, expected: str) -> None:
        assert str(z) == expected

    def test_custom_format_spec(self) -> None:
        assert f"{ComplexNumber(1 / 3, 2 / 3):.2f}" == "0.33+0.67i"
        assert f"{ComplexNumber(1.5, -2.26):.1f}" == "1.5-2.3i"

    @pytest.mark.parametrize(
        "z, expected",
        [
            (ComplexNumber(float("nan"), float("nan")), "nan+nani"),
            (ComplexNumber(1, float("nan")), "1+nani"),
            (ComplexNumber(1, float("-inf")), "1-infi"),
            (ComplexNumber(1, float("inf")), "1+infi"),
        ],
    )
    def test_non_finite_components(self, z: ComplexNumber, expected: str) -> None:
        assert str(z) == expected
