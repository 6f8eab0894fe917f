"""
Execution context for the interpreter.

Holds the variable Environment for one program run together with the
integer semantics and the source lines used in error messages.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .values import IntegerSemantics, DEFAULT_SEMANTICS


@dataclass
class Environment:
    """
    Variable bindings for one program run.

    Bindings keep insertion order; reassigning a name keeps its original
    position. There is a single flat namespace: blocks do not open scopes.
    """
    variables: Dict[str, int] = field(default_factory=dict)

    def get(self, name: str) -> Optional[int]:
        """Look up a variable, returning None if it is unbound."""
        return self.variables.get(name)

    def set(self, name: str, value: int) -> None:
        """Insert or overwrite a binding."""
        self.variables[name] = value

    def contains(self, name: str) -> bool:
        return name in self.variables

    def snapshot(self) -> Dict[str, int]:
        """Copy of the current bindings, in insertion order."""
        return dict(self.variables)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self.variables.items())

    def __len__(self) -> int:
        return len(self.variables)

    def __contains__(self, name: str) -> bool:
        return self.contains(name)


@dataclass
class ExecutionContext:
    """
    The full execution context for interpreting a program.

    Tracks:
    - The variable environment
    - Integer semantics (width and overflow behaviour)
    - Source lines for diagnostics
    """
    environment: Environment = field(default_factory=Environment)
    semantics: IntegerSemantics = DEFAULT_SEMANTICS
    source_lines: List[str] = field(default_factory=list)
    filename: Optional[str] = None

    def get_variable(self, name: str) -> Optional[int]:
        """Look up a variable in the environment."""
        return self.environment.get(name)

    def set_variable(self, name: str, value: int) -> None:
        """Bind a variable in the environment."""
        self.environment.set(name, value)

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a source line for error messages."""
        if 1 <= line_num <= len(self.source_lines):
            return self.source_lines[line_num - 1]
        return None


def create_context(
    source: str = "",
    semantics: Optional[IntegerSemantics] = None,
    environment: Optional[Environment] = None,
    filename: Optional[str] = None,
) -> ExecutionContext:
    """
    Create a new execution context for a program run.

    Args:
        source: The source code (for error messages)
        semantics: Integer width and overflow mode; 64-bit wraparound by default
        environment: Existing bindings to run against; a fresh one by default
        filename: Optional filename for error messages

    Returns:
        An ExecutionContext
    """
    return ExecutionContext(
        environment=environment if environment is not None else Environment(),
        semantics=semantics or DEFAULT_SEMANTICS,
        source_lines=source.splitlines() if source else [],
        filename=filename,
    )
