"""
Core math modules — численное ядро квантовых вычислений

Комплексные числа, 3D-векторы, комплексные матрицы и вероятностная модель
измерений с явной валидацией входов.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_DISTRIBUTION,
    EPS_EQUALITY,
    EPS_MACHINE,
    EPS_NORMALIZATION,
    EPS_PROBABILITY_ZERO,
    EPS_UNIT_VECTOR,
    EPS_ZERO_VECTOR_SQUARED,
    # Predicates
    clamp,
    is_close,
    is_valid_float,
    is_zero,
    # Validation
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive_int,
    validate_real_number,
    validate_tolerance,
)

# Errors
from src.core.math.errors import (
    ArgumentError,
    DivideByZeroError,
    DomainError,
    IndexOutOfRangeError,
    InvalidOperationError,
    InvariantViolation,
    QuantumMathError,
    ZeroNormalizationError,
)

# ComplexNumber
from src.core.math.complex_number import (
    COMPLEX_ONE,
    COMPLEX_ZERO,
    IMAGINARY_UNIT,
    NEGATIVE_IMAGINARY_UNIT,
    ComplexNumber,
    as_complex,
)

# Vector3
from src.core.math.vector3 import (
    UNIT_X,
    UNIT_Y,
    UNIT_Z,
    VECTOR_ZERO,
    CylindricalCoordinates,
    SphericalCoordinates,
    Vector3,
)

# ComplexMatrix
from src.core.math.complex_matrix import ComplexMatrix

# Probability (функции доступны через модуль: probability.entropy(...))
from src.core.math import probability
from src.core.math.probability import MeasurementOutcome

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "EPS_DISTRIBUTION",
    "EPS_EQUALITY",
    "EPS_MACHINE",
    "EPS_NORMALIZATION",
    "EPS_PROBABILITY_ZERO",
    "EPS_UNIT_VECTOR",
    "EPS_ZERO_VECTOR_SQUARED",
    # Numerical Safeguards: Predicates
    "clamp",
    "is_close",
    "is_valid_float",
    "is_zero",
    # Numerical Safeguards: Validation
    "validate_finite",
    "validate_in_range",
    "validate_non_negative",
    "validate_positive_int",
    "validate_real_number",
    "validate_tolerance",
    # Errors
    "ArgumentError",
    "DivideByZeroError",
    "DomainError",
    "IndexOutOfRangeError",
    "InvalidOperationError",
    "InvariantViolation",
    "QuantumMathError",
    "ZeroNormalizationError",
    # ComplexNumber
    "COMPLEX_ONE",
    "COMPLEX_ZERO",
    "IMAGINARY_UNIT",
    "NEGATIVE_IMAGINARY_UNIT",
    "ComplexNumber",
    "as_complex",
    # Vector3
    "UNIT_X",
    "UNIT_Y",
    "UNIT_Z",
    "VECTOR_ZERO",
    "CylindricalCoordinates",
    "SphericalCoordinates",
    "Vector3",
    # ComplexMatrix
    "ComplexMatrix",
    # Probability
    "MeasurementOutcome",
    "probability",
]
