"""Calculator sessions for Calc History.

A session is the composition root used by the CLI:
- Owns one or more named in-memory histories
- Owns one calculator bound to the current history
- Rebinds the calculator when another history is selected
"""

from typing import Dict, List, Optional, Tuple

from .calculator import SimpleCalculator, int_range
from .config import CalcConfig
from .history import InMemoryHistory


DEFAULT_STORE = "default"

OPERATION_ALIASES = {
    "add": "add",
    "sub": "subtract",
    "subtract": "subtract",
    "mul": "multiply",
    "multiply": "multiply",
    "div": "divide",
    "divide": "divide",
}

OPERATIONS = ["add", "subtract", "multiply", "divide"]


def resolve_operation(name: str) -> str:
    """Map an operation name or alias to a calculator method name.

    Raises:
        ValueError: If the name is not a known operation.
    """
    operation = OPERATION_ALIASES.get(name.strip().lower())
    if operation is None:
        raise ValueError(f"Unknown operation: {name}")
    return operation


def parse_operand(raw: str) -> int:
    """Parse a base-10 integer operand."""
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Not an integer: {raw}") from None


def parse_count(raw: str) -> int:
    """Parse a history count (a non-negative integer)."""
    try:
        count = int(raw)
    except ValueError:
        count = -1

    if count < 0:
        raise ValueError(f"History count must be a non-negative integer, got '{raw}'")
    return count


def parse_steps(tokens: List[str]) -> List[Tuple[str, int, int]]:
    """Group flat tokens into (operation, a, b) steps.

    Args:
        tokens: Tokens such as ["add", "2", "2", "mul", "3", "3"].

    Returns:
        List of (method name, a, b) tuples.

    Raises:
        ValueError: If the tokens do not form whole steps.
    """
    if len(tokens) % 3 != 0:
        raise ValueError("Each step needs an operation and two operands")

    steps = []
    for i in range(0, len(tokens), 3):
        op, a, b = tokens[i : i + 3]
        steps.append((resolve_operation(op), parse_operand(a), parse_operand(b)))
    return steps


class CalcSession:
    """Named histories plus one calculator bound to the current one."""

    def __init__(self, config: Optional[CalcConfig] = None):
        self.config = config or CalcConfig()
        self.stores: Dict[str, InMemoryHistory] = {DEFAULT_STORE: InMemoryHistory()}
        self.current = DEFAULT_STORE
        self.calculator = SimpleCalculator(
            self.stores[DEFAULT_STORE], int_bits=self.config.int_bits
        )

    @property
    def history(self) -> InMemoryHistory:
        """Return the history the calculator currently writes to."""
        return self.stores[self.current]

    def apply(self, operation: str, a: int, b: int) -> int:
        """Run one operation on the calculator.

        Raises:
            ValueError: If the operation is unknown or an operand does not
                fit the configured integer width.
        """
        method = getattr(self.calculator, resolve_operation(operation))
        self.check_operand(a)
        self.check_operand(b)
        return method(a, b)

    def check_operand(self, value: int) -> None:
        """Reject an operand outside the configured integer width."""
        bounds = int_range(self.config.int_bits)
        if bounds is not None and not bounds[0] <= value <= bounds[1]:
            raise ValueError(
                f"Operand {value} is out of range for {self.config.int_bits}-bit "
                f"integers ({bounds[0]}..{bounds[1]})"
            )

    def use(self, name: str) -> InMemoryHistory:
        """Select a named history, creating it if needed, and rebind."""
        if name not in self.stores:
            self.stores[name] = InMemoryHistory()

        self.current = name
        self.calculator.set_history(self.stores[name])
        return self.stores[name]

    def last(self, count: Optional[int] = None) -> List[str]:
        """Return the most recent records of the current history."""
        if count is None:
            count = self.config.history_limit
        return self.history.get_last_operations(count)

    def store_sizes(self) -> List[Tuple[str, int]]:
        """Return (name, record count) for every history, in creation order."""
        return [(name, len(store)) for name, store in self.stores.items()]
