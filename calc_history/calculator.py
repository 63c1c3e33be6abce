"""Integer calculator for Calc History.

Every successful operation is written to the bound history as
"<a> <op> <b> = <result>" before the result is returned. The history
can be swapped at any time with set_history().

Division by zero is not an error the caller can handle: it aborts the
process and leaves the history untouched.
"""

import os
import sys
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from rich.console import Console

from .history import History


err_console = Console(stderr=True)

# Width of the native ``int`` the results wrap to by default
DEFAULT_INT_BITS = 32


def format_record(a: int, op: str, b: int, result: int) -> str:
    """Format one operation record."""
    return f"{a} {op} {b} = {result}"


def wrap_int(value: int, bits: int) -> int:
    """Wrap value to a signed two's-complement integer of ``bits`` width.

    Args:
        value: Integer to wrap.
        bits: Target width. 0 leaves the value unbounded.

    Returns:
        The wrapped integer.
    """
    if bits <= 0:
        return value

    modulus = 1 << bits
    value &= modulus - 1
    if value >= modulus >> 1:
        value -= modulus
    return value


def int_range(bits: int) -> Optional[Tuple[int, int]]:
    """Return (min, max) of a signed integer ``bits`` wide, None if unbounded."""
    if bits <= 0:
        return None
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def truncating_divide(a: int, b: int) -> int:
    """Divide rounding toward zero (``//`` rounds toward negative infinity)."""
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return quotient


def fatal_fault(message: str) -> None:
    """Report an unrecoverable fault and abort the process."""
    err_console.print(f"[bold red]Fatal: {message}[/bold red]")
    sys.stderr.flush()
    os.abort()


class Calculator(ABC):
    """Four integer operations recorded into a swappable history."""

    @abstractmethod
    def add(self, a: int, b: int) -> int:
        pass

    @abstractmethod
    def subtract(self, a: int, b: int) -> int:
        pass

    @abstractmethod
    def multiply(self, a: int, b: int) -> int:
        pass

    @abstractmethod
    def divide(self, a: int, b: int) -> int:
        pass

    @abstractmethod
    def set_history(self, history: History) -> None:
        pass


class SimpleCalculator(Calculator):
    """Calculator writing one record per operation to its history.

    The calculator only borrows the history: rebinding or dropping the
    calculator never clears a store.
    """

    def __init__(self, history: History, int_bits: int = DEFAULT_INT_BITS):
        """Initialize bound to a history.

        Args:
            history: Store receiving operation records.
            int_bits: Width results wrap to (0 = unbounded).
        """
        if int_bits < 0:
            raise ValueError(f"int_bits must be non-negative, got {int_bits}")

        self._history = history
        self.int_bits = int_bits

    @property
    def history(self) -> History:
        """Return the currently bound history."""
        return self._history

    def set_history(self, history: History) -> None:
        """Bind a different history for all later operations."""
        self._history = history

    def add(self, a: int, b: int) -> int:
        a, b = self._operands(a, b)
        result = wrap_int(a + b, self.int_bits)
        self._log_operation(a, "+", b, result)
        return result

    def subtract(self, a: int, b: int) -> int:
        a, b = self._operands(a, b)
        result = wrap_int(a - b, self.int_bits)
        self._log_operation(a, "-", b, result)
        return result

    def multiply(self, a: int, b: int) -> int:
        a, b = self._operands(a, b)
        result = wrap_int(a * b, self.int_bits)
        self._log_operation(a, "*", b, result)
        return result

    def divide(self, a: int, b: int) -> int:
        """Divide truncating toward zero. Aborts the process if b is 0."""
        a, b = self._operands(a, b)
        if b == 0:
            fatal_fault(f"integer division by zero ({a} / {b})")

        result = wrap_int(truncating_divide(a, b), self.int_bits)
        self._log_operation(a, "/", b, result)
        return result

    def _operands(self, a: int, b: int) -> Tuple[int, int]:
        # Operands are converted to the same width as results
        return wrap_int(a, self.int_bits), wrap_int(b, self.int_bits)

    def _log_operation(self, a: int, op: str, b: int, result: int) -> None:
        self._history.add_entry(format_record(a, op, b, result))
