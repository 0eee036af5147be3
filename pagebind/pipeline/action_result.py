"""
================================================================================
Action Result and Context
================================================================================

ActionContext carries the parameters of a verb; ActionResult is the tagged,
immutable outcome of executing it.

    ActionResult.successful(value)   -> success, optional value
    ActionResult.failure(error)      -> failure, always carries the error

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ActionContext:
    """
    Base verb parameters.

    Attributes:
        property_name: Name of the property the verb targets
    """
    property_name: Optional[str] = None


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of a verb execution.

    Attributes:
        success: Whether the verb succeeded
        result: Value produced by a successful verb
        error: Error of a failed verb (never None on failure)
    """
    success: bool
    result: Any = None
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if not self.success and self.error is None:
            raise ValueError("A failed ActionResult must carry an error")

    @classmethod
    def successful(cls, result: Any = None) -> "ActionResult":
        return cls(True, result)

    @classmethod
    def failure(cls, error: BaseException) -> "ActionResult":
        return cls(False, None, error)

    def check_result(self) -> Any:
        """
        Return the result value, raising the error of a failed result.

        Raises:
            BaseException: The carried error when the verb failed
        """
        if not self.success:
            raise self.error
        return self.result

    def __repr__(self) -> str:
        if self.success:
            return f"ActionResult.successful({self.result!r})"
        return f"ActionResult.failure({self.error!r})"


__all__ = ["ActionContext", "ActionResult"]
