"""
Operation status shared by the stores.

Every network-backed action moves through idle -> pending -> succeeded or
failed. Terminal states stay put until the caller acknowledges them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Operation(str, Enum):
    """Lifecycle of the most recent mutation."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class LoadingFlag(str, Enum):
    """Which spinner an action drives."""

    LOADING = "loading"  # single booking fetch / save / cancel
    LIST = "list_loading"  # list fetch / delete
    ACTION = "action_loading"  # note actions


class OperationStatus(BaseModel):
    """Status record attached to a store."""

    loading: bool = False
    list_loading: bool = False
    action_loading: bool = False
    error: Optional[str] = None
    operation: Operation = Operation.IDLE

    @property
    def is_idle(self) -> bool:
        return self.operation is Operation.IDLE

    @property
    def is_pending(self) -> bool:
        return self.operation is Operation.PENDING

    @property
    def succeeded(self) -> bool:
        return self.operation is Operation.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.operation is Operation.FAILED

    def _set_flag(self, flag: LoadingFlag, value: bool) -> None:
        if flag is LoadingFlag.LOADING:
            self.loading = value
        elif flag is LoadingFlag.LIST:
            self.list_loading = value
        else:
            self.action_loading = value

    def begin(self, flag: LoadingFlag, mutation: bool = False) -> None:
        self._set_flag(flag, True)
        self.error = None
        if mutation:
            self.operation = Operation.PENDING

    def succeed(self, flag: LoadingFlag, mutation: bool = False) -> None:
        self._set_flag(flag, False)
        if mutation:
            self.operation = Operation.SUCCEEDED

    def fail(self, flag: LoadingFlag, message: str, mutation: bool = False) -> None:
        self._set_flag(flag, False)
        self.error = message
        if mutation:
            self.operation = Operation.FAILED

    def acknowledge(self) -> None:
        """Caller has handled the terminal state; back to idle."""
        self.operation = Operation.IDLE
        self.error = None

    def reset(self) -> None:
        self.loading = False
        self.list_loading = False
        self.action_loading = False
        self.error = None
        self.operation = Operation.IDLE
