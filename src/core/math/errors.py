"""
Errors — Типизированные ошибки математического ядра

Все публичные операции валидируют входы сразу и сообщают об ошибке
исключением, а не sentinel-значением. Каждый класс наследует и от
встроенного исключения Python, поэтому код, ловящий ValueError /
ZeroDivisionError / IndexError, продолжает работать.

ИЕРАРХИЯ:
    QuantumMathError
    ├── ArgumentError (ValueError)
    │   └── IndexOutOfRangeError (IndexError)
    ├── DomainError (ValueError)
    │   ├── DivideByZeroError (ZeroDivisionError)
    │   └── ZeroNormalizationError (+ InvalidOperationError)
    ├── InvalidOperationError (ValueError)
    └── InvariantViolation (ValueError)
"""


class QuantumMathError(Exception):
    """Базовый класс всех ошибок ядра."""


class ArgumentError(QuantumMathError, ValueError):
    """
    Некорректный аргумент: отсутствующий вход, несовпадающие размерности,
    пустая коллекция, индекс вне объявленных границ.
    """


class IndexOutOfRangeError(ArgumentError, IndexError):
    """Индекс элемента матрицы или компоненты вектора вне диапазона."""


class DomainError(QuantumMathError, ValueError):
    """
    Математически неопределённая операция.

    Деление на (почти) ноль, нормализация нулевой величины, вероятность
    вне [0, 1], не конечная фаза, отрицательный вес, 0 в отрицательной степени.
    """


class DivideByZeroError(DomainError, ZeroDivisionError):
    """Деление на (почти) нулевой делитель."""


class InvalidOperationError(QuantumMathError, ValueError):
    """
    Операция не определена для формы операнда.

    Например trace неквадратной матрицы или inner product не-векторов.
    """


class ZeroNormalizationError(DomainError, InvalidOperationError):
    """Нормализация вектора состояния с (почти) нулевой нормой."""


class InvariantViolation(QuantumMathError, ValueError):
    """
    Нарушение инварианта распределения: |Σp - 1| > tolerance.
    """
