"""Calc History - integer calculator with pluggable operation history.

A small arithmetic evaluator with:
- Four integer operations (add, subtract, multiply, divide)
- A textual record of every operation ("2 + 2 = 4")
- Swappable history sinks (rebind at any time)
- Fail-fast division by zero (the process aborts)
"""

__version__ = "1.0.0"
__author__ = "Morten Elmstroem Hansen"

from .history import (
    History,
    InMemoryHistory,
)
from .calculator import (
    Calculator,
    SimpleCalculator,
    format_record,
    int_range,
    truncating_divide,
    wrap_int,
)
from .config import (
    CalcConfig,
    load_config,
)
from .session import CalcSession

__all__ = [
    # History
    "History",
    "InMemoryHistory",
    # Calculator
    "Calculator",
    "SimpleCalculator",
    "format_record",
    "int_range",
    "truncating_divide",
    "wrap_int",
    # Configuration
    "CalcConfig",
    "load_config",
    # Sessions
    "CalcSession",
]
