"""
ComplexMatrix — Плотная комплексная матрица

Контейнер rows × columns над np.ndarray(dtype=complex128) с общими
матричными операциями и квантово-специфичными (inner/outer product,
expectation value, проверки Hermitian/unitary).

Семантика "mutable container, value-like operations":
- Элементы изменяются только явным присваиванием m[i, j] = value
- Каждая алгебраическая операция возвращает НОВУЮ матрицу, операнды
  не изменяются и не разделяют с результатом буфер numpy
- На границе API элементы — ComplexNumber (m[i, j], to_rows)

Соглашения:
- columns == 1 → вектор-столбец (квантовое состояние |ψ⟩)
- rows == 1 → вектор-строка
- Индекс — пара int в [0, rows) × [0, columns), отрицательные отклоняются

ФОРМУЛЫ:
    (A·B)[i, j] = Σ_k A[i, k]·B[k, j]
    A† = conjugate(transpose(A))
    ‖A‖_F = sqrt(Σ |A[i, j]|²)
    ⟨a|b⟩ = Σ conj(a_i)·b_i
    |a⟩⟨b| = a·b†
    ⟨O⟩ = ⟨ψ|O|ψ⟩
"""

from collections.abc import Sequence

import numpy as np

from src.core.math.complex_number import (
    COMPLEX_ZERO,
    ComplexNumber,
    as_complex,
)
from src.core.math.errors import (
    ArgumentError,
    DivideByZeroError,
    IndexOutOfRangeError,
    InvalidOperationError,
    ZeroNormalizationError,
)
from src.core.math.numerical_safeguards import (
    EPS_EQUALITY,
    EPS_MACHINE,
    EPS_NORMALIZATION,
    validate_positive_int,
    validate_tolerance,
)

ScalarLike = ComplexNumber | complex | float


class ComplexMatrix:
    """
    Плотная комплексная матрица.

    Операторы: + и - (поэлементно), @ (матричное произведение),
    * и / на скаляр, unary -. Именованные методы add/subtract/multiply/
    scale/divide/negate реализуют ту же семантику.

    Матрица изменяемая, поэтому не хешируется; == сравнивает поэлементно.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, columns: int) -> None:
        """
        Нулевая матрица rows × columns.

        Raises:
            ArgumentError: Если rows или columns не положительные
        """
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")

        self._data = np.zeros((rows, columns), dtype=np.complex128)

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[ScalarLike]]) -> "ComplexMatrix":
        """
        Создание из 2D (или jagged) последовательности.

        Элементы конвертируются явно через as_complex: допустимы
        ComplexNumber, int/float и встроенный complex.

        Raises:
            ArgumentError: Если последовательность пустая, строки разной
                длины или элемент недопустимого типа

        Examples:
            >>> m = ComplexMatrix.from_rows([[1, 2], [3, 4]])
            >>> (m.rows, m.columns)
            (2, 2)
        """
        if rows is None or len(rows) == 0:
            raise ArgumentError("Elements array cannot be empty")

        columns = len(rows[0])
        if columns == 0:
            raise ArgumentError("Rows cannot be empty")

        for index, row in enumerate(rows):
            if len(row) != columns:
                raise ArgumentError(
                    f"All rows must have the same number of columns: "
                    f"row 0 has {columns}, row {index} has {len(row)}"
                )

        return cls._from_array(
            np.array(
                [[as_complex(value).to_complex() for value in row] for row in rows],
                dtype=np.complex128,
            )
        )

    @classmethod
    def identity(cls, size: int) -> "ComplexMatrix":
        validate_positive_int(size, "size")
        return cls._from_array(np.eye(size, dtype=np.complex128))

    @classmethod
    def zero(cls, rows: int, columns: int) -> "ComplexMatrix":
        return cls(rows, columns)

    @classmethod
    def fill(cls, rows: int, columns: int, value: ScalarLike) -> "ComplexMatrix":
        validate_positive_int(rows, "rows")
        validate_positive_int(columns, "columns")
        return cls._from_array(
            np.full((rows, columns), as_complex(value).to_complex(), dtype=np.complex128)
        )

    @classmethod
    def diagonal(cls, *values: ScalarLike) -> "ComplexMatrix":
        """
        Диагональная матрица из элементов values.

        Raises:
            ArgumentError: Если values пустой
        """
        if not values:
            raise ArgumentError("Diagonal elements cannot be empty")

        diagonal = np.array(
            [as_complex(value).to_complex() for value in values], dtype=np.complex128
        )
        return cls._from_array(np.diag(diagonal))

    @classmethod
    def column_vector(cls, *values: ScalarLike) -> "ComplexMatrix":
        """Вектор-столбец (квантовое состояние) n × 1."""
        if not values:
            raise ArgumentError("Vector elements cannot be empty")
        return cls.from_rows([[value] for value in values])

    @classmethod
    def row_vector(cls, *values: ScalarLike) -> "ComplexMatrix":
        if not values:
            raise ArgumentError("Vector elements cannot be empty")
        return cls.from_rows([list(values)])

    # =========================================================================
    # PROPERTIES AND ELEMENT ACCESS
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def is_square(self) -> bool:
        return self.rows == self.columns

    @property
    def is_vector(self) -> bool:
        return self.columns == 1

    @property
    def is_row_vector(self) -> bool:
        return self.rows == 1

    def _validate_indices(self, index: object) -> tuple[int, int]:
        """
        Проверка индекса m[row, column].

        Raises:
            ArgumentError: Если индекс не пара целых чисел
            IndexOutOfRangeError: Если индекс вне границ матрицы
        """
        if not isinstance(index, tuple) or len(index) != 2:
            raise ArgumentError(f"Matrix index must be a (row, column) pair, got {index!r}")

        row, column = index
        if not _is_index(row) or not _is_index(column):
            raise ArgumentError(f"Matrix indices must be integers, got ({row!r}, {column!r})")

        if not 0 <= row < self.rows:
            raise IndexOutOfRangeError(
                f"Row index {row} is out of range [0, {self.rows - 1}]"
            )
        if not 0 <= column < self.columns:
            raise IndexOutOfRangeError(
                f"Column index {column} is out of range [0, {self.columns - 1}]"
            )
        return int(row), int(column)

    def __getitem__(self, index: tuple[int, int]) -> ComplexNumber:
        row, column = self._validate_indices(index)
        return _to_complex_number(self._data[row, column])

    def __setitem__(self, index: tuple[int, int], value: ScalarLike) -> None:
        row, column = self._validate_indices(index)
        self._data[row, column] = as_complex(value).to_complex()

    def to_rows(self) -> list[list[ComplexNumber]]:
        """Копия сетки элементов (изменение копии не влияет на матрицу)."""
        return [[_to_complex_number(value) for value in row] for row in self._data]

    def clone(self) -> "ComplexMatrix":
        return self._from_array(self._data.copy())

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def add(self, other: "ComplexMatrix") -> "ComplexMatrix":
        """
        Raises:
            ArgumentError: Если размерности не совпадают
        """
        self._require_same_dimensions(other, "addition")
        return self._from_array(self._data + other._data)

    def subtract(self, other: "ComplexMatrix") -> "ComplexMatrix":
        self._require_same_dimensions(other, "subtraction")
        return self._from_array(self._data - other._data)

    def multiply(self, other: "ComplexMatrix") -> "ComplexMatrix":
        """
        Матричное произведение self · other.

        Raises:
            ArgumentError: Если self.columns != other.rows
        """
        _require_matrix(other)
        if self.columns != other.rows:
            raise ArgumentError(
                f"Left matrix columns must equal right matrix rows for multiplication: "
                f"{self.rows}×{self.columns} · {other.rows}×{other.columns}"
            )

        return self._from_array(self._data @ other._data)

    def scale(self, scalar: ScalarLike) -> "ComplexMatrix":
        return self._from_array(self._data * as_complex(scalar).to_complex())

    def divide(self, scalar: ScalarLike) -> "ComplexMatrix":
        """
        Деление на скаляр.

        Raises:
            DivideByZeroError: Если scalar == 0
        """
        divisor = as_complex(scalar)
        if divisor == COMPLEX_ZERO:
            raise DivideByZeroError("Cannot divide matrix by zero")
        return self._from_array(self._data / divisor.to_complex())

    def negate(self) -> "ComplexMatrix":
        return self._from_array(-self._data)

    # =========================================================================
    # MATRIX OPERATIONS
    # =========================================================================

    def transpose(self) -> "ComplexMatrix":
        return self._from_array(self._data.T.copy())

    def conjugate_transpose(self) -> "ComplexMatrix":
        return self._from_array(self._data.conj().T)

    def dagger(self) -> "ComplexMatrix":
        """A† — синоним conjugate_transpose."""
        return self.conjugate_transpose()

    def trace(self) -> ComplexNumber:
        """
        Сумма диагональных элементов.

        Raises:
            InvalidOperationError: Если матрица не квадратная
        """
        if not self.is_square:
            raise InvalidOperationError(
                f"Trace is only defined for square matrices, got {self.rows}×{self.columns}"
            )
        return _to_complex_number(np.trace(self._data))

    def frobenius_norm(self) -> float:
        return float(np.linalg.norm(self._data))

    def is_hermitian(self, tolerance: float = EPS_EQUALITY) -> bool:
        """
        M[i, j] ≈ conjugate(M[j, i]) для всех i, j.

        Для неквадратной матрицы возвращает False.

        Raises:
            ArgumentError: Если tolerance не конечный положительный
        """
        validate_tolerance(tolerance)
        if not self.is_square:
            return False
        return _within_tolerance(self._data - self._data.conj().T, tolerance)

    def is_unitary(self, tolerance: float = EPS_EQUALITY) -> bool:
        """
        M · M† ≈ I с поэлементным допуском.

        Для неквадратной матрицы возвращает False.
        """
        validate_tolerance(tolerance)
        if not self.is_square:
            return False

        product = self._data @ self._data.conj().T
        return _within_tolerance(product - np.eye(self.rows), tolerance)

    def submatrix(
        self, start_row: int, start_column: int, row_count: int, column_count: int
    ) -> "ComplexMatrix":
        """
        Блок row_count × column_count, начиная с (start_row, start_column).

        Raises:
            ArgumentError: Если параметры отрицательные/нулевые или блок
                выходит за границы матрицы
        """
        if start_row < 0 or start_column < 0 or row_count <= 0 or column_count <= 0:
            raise ArgumentError(
                f"Invalid submatrix parameters: start=({start_row}, {start_column}), "
                f"size={row_count}×{column_count}"
            )

        if start_row + row_count > self.rows or start_column + column_count > self.columns:
            raise ArgumentError(
                f"Submatrix extends beyond matrix bounds {self.rows}×{self.columns}"
            )

        return self._from_array(
            self._data[
                start_row : start_row + row_count, start_column : start_column + column_count
            ].copy()
        )

    def get_row(self, row_index: int) -> "ComplexMatrix":
        if not 0 <= row_index < self.rows:
            raise IndexOutOfRangeError(
                f"Row index {row_index} is out of range [0, {self.rows - 1}]"
            )
        return self._from_array(self._data[row_index : row_index + 1, :].copy())

    def get_column(self, column_index: int) -> "ComplexMatrix":
        if not 0 <= column_index < self.columns:
            raise IndexOutOfRangeError(
                f"Column index {column_index} is out of range [0, {self.columns - 1}]"
            )
        return self._from_array(self._data[:, column_index : column_index + 1].copy())

    # =========================================================================
    # QUANTUM-SPECIFIC OPERATIONS
    # =========================================================================

    def inner_product(self, other: "ComplexMatrix") -> ComplexNumber:
        """
        ⟨self|other⟩ = Σ conj(self_i) · other_i.

        Raises:
            InvalidOperationError: Если один из операндов не вектор-столбец
            ArgumentError: Если размерности векторов не совпадают
        """
        _require_matrix(other)
        if not self.is_vector or not other.is_vector:
            raise InvalidOperationError("Inner product is only defined for vectors")

        if self.rows != other.rows:
            raise ArgumentError(
                f"Vectors must have the same dimension: {self.rows} != {other.rows}"
            )

        return _to_complex_number(np.vdot(self._data, other._data))

    def outer_product(self, other: "ComplexMatrix") -> "ComplexMatrix":
        """|self⟩⟨other| = self · other†."""
        _require_matrix(other)
        if not self.is_vector or not other.is_vector:
            raise InvalidOperationError("Outer product is only defined for vectors")

        return self._from_array(np.outer(self._data[:, 0], other._data[:, 0].conj()))

    def normalize(self) -> "ComplexMatrix":
        """
        Нормировка вектора состояния: ψ / ‖ψ‖.

        Raises:
            InvalidOperationError: Если матрица не вектор-столбец
            ZeroNormalizationError: Если норма (почти) нулевая
        """
        if not self.is_vector:
            raise InvalidOperationError("Normalization is only defined for vectors")

        norm = self.frobenius_norm()
        if norm * norm < EPS_MACHINE:
            raise ZeroNormalizationError("Cannot normalize zero vector")

        return self._from_array(self._data / norm)

    def expectation_value(self, observable: "ComplexMatrix") -> ComplexNumber:
        """
        ⟨ψ|O|ψ⟩.

        Args:
            observable: Квадратная матрица размерности state.rows

        Raises:
            InvalidOperationError: Если self не вектор-столбец
            ArgumentError: Если observable не квадратная или размерность другая
        """
        _require_matrix(observable)
        if not self.is_vector:
            raise InvalidOperationError("Expectation value requires a state vector")

        if not observable.is_square or observable.rows != self.rows:
            raise ArgumentError(
                f"Observable must be a square matrix with the same dimension as the state: "
                f"observable {observable.rows}×{observable.columns}, state dimension {self.rows}"
            )

        return _to_complex_number(np.vdot(self._data, observable._data @ self._data))

    def is_valid_quantum_state(self, tolerance: float = EPS_NORMALIZATION) -> bool:
        validate_tolerance(tolerance)
        if not self.is_vector:
            return False
        return abs(self.frobenius_norm() - 1.0) < tolerance

    # =========================================================================
    # EQUALITY
    # =========================================================================

    def approx_equals(self, other: "ComplexMatrix", tolerance: float = EPS_EQUALITY) -> bool:
        """Поэлементное сравнение с допуском; размерности должны совпадать."""
        validate_tolerance(tolerance)
        if not isinstance(other, ComplexMatrix):
            return False
        if self._data.shape != other._data.shape:
            return False
        return _within_tolerance(self._data - other._data, tolerance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        if self is other:
            return True
        return self._data.shape == other._data.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None  # mutable container

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def __add__(self, other):
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        return self.subtract(other)

    def __matmul__(self, other):
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        return self.multiply(other)

    def __mul__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        return self.scale(scalar)

    def __rmul__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        return self.scale(scalar)

    def __truediv__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        return self.divide(scalar)

    def __neg__(self) -> "ComplexMatrix":
        return self.negate()

    # =========================================================================
    # STRING REPRESENTATION
    # =========================================================================

    def __format__(self, format_spec: str) -> str:
        lines = [f"Matrix {self.rows}×{self.columns}:"]
        for row in self.to_rows():
            lines.append("[ " + ", ".join(format(element, format_spec) for element in row) + " ]")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.__format__("")

    def __repr__(self) -> str:
        return f"ComplexMatrix(rows={self.rows}, columns={self.columns})"

    # =========================================================================
    # INTERNAL
    # =========================================================================

    @classmethod
    def _from_array(cls, data: np.ndarray) -> "ComplexMatrix":
        # data не должен быть view чужого буфера
        matrix = cls.__new__(cls)
        matrix._data = data
        return matrix

    def _require_same_dimensions(self, other: "ComplexMatrix", operation: str) -> None:
        _require_matrix(other)
        if self._data.shape != other._data.shape:
            raise ArgumentError(
                f"Matrices must have the same dimensions for {operation}: "
                f"{self.rows}×{self.columns} vs {other.rows}×{other.columns}"
            )


def _to_complex_number(value: complex) -> ComplexNumber:
    return ComplexNumber(float(value.real), float(value.imag))


def _within_tolerance(delta: np.ndarray, tolerance: float) -> bool:
    """|Δreal| < tolerance и |Δimaginary| < tolerance для каждого элемента."""
    return bool(np.all(np.abs(delta.real) < tolerance) and np.all(np.abs(delta.imag) < tolerance))


def _require_matrix(value: object) -> None:
    if not isinstance(value, ComplexMatrix):
        raise ArgumentError(f"Expected ComplexMatrix, got {type(value).__name__}")


def _is_index(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_scalar(value: object) -> bool:
    return isinstance(value, (ComplexNumber, complex, int, float)) and not isinstance(value, bool)
