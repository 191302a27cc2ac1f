"""
Result codes and result values for service and machine operations.

Each operation family has its own code enum. Members of different enums
never compare equal, so a caller can tell a machine code from a service code.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ResultCode(Enum):
    """Common base for every result code enum."""

    @property
    def is_ok(self) -> bool:
        return self.name == "OK"


class ServiceBalanceResultCode(ResultCode):
    OK = "ok"
    AUTHORIZATION_ERROR = "authorization_error"
    ERROR_OTHERS = "error_others"


class ServiceWithdrawResultCode(ResultCode):
    OK = "ok"
    AUTHORIZATION_ERROR = "authorization_error"
    ERROR_INSUFFICIENT_BALANCE = "error_insufficient_balance"
    ERROR_OTHERS = "error_others"


class ServiceDepositResultCode(ResultCode):
    OK = "ok"
    AUTHORIZATION_ERROR = "authorization_error"
    ERROR_OTHERS = "error_others"


class MachineWithdrawResultCode(ResultCode):
    OK = "ok"
    ERROR_CASH_BIN_INSUFFICIENT_FUND = "error_cash_bin_insufficient_fund"
    ERROR_MECHANICAL = "error_mechanical"
    ERROR_OTHERS = "error_others"


class MachineDepositResultCode(ResultCode):
    OK = "ok"
    ERROR_CASH_BIN_FULL = "error_cash_bin_full"
    ERROR_MECHANICAL = "error_mechanical"
    ERROR_OTHERS = "error_others"


WithdrawResultCode = Union[ServiceWithdrawResultCode, MachineWithdrawResultCode]
DepositResultCode = Union[ServiceDepositResultCode, MachineDepositResultCode]


@dataclass(frozen=True)
class ServiceBalanceResult:
    code: ServiceBalanceResultCode
    balance: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.code.is_ok


@dataclass(frozen=True)
class ServiceWithdrawResult:
    code: ServiceWithdrawResultCode
    new_balance: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.code.is_ok


@dataclass(frozen=True)
class ServiceDepositResult:
    code: ServiceDepositResultCode
    new_balance: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.code.is_ok


@dataclass(frozen=True)
class _TransactionResult:
    code: ResultCode
    new_balance: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.code.is_ok

    @property
    def needs_support(self) -> bool:
        """
        True when the ledger was updated but the machine failed to move cash.
        The UI should direct the customer to contact support.
        """
        return not self.ok and self.new_balance is not None


@dataclass(frozen=True)
class WithdrawResult(_TransactionResult):
    code: WithdrawResultCode


@dataclass(frozen=True)
class DepositResult(_TransactionResult):
    code: DepositResultCode


BalanceResult = ServiceBalanceResult
