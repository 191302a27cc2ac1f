from atm_controller.core.card import Card, CardNumber, PIN
from atm_controller.core.controller import ATMController, SessionState
from atm_controller.core.errors import (
    ATMError,
    AuthorizationError,
    CardSlotOccupiedError,
    ConfigError,
    NoCardError,
)
from atm_controller.core.interfaces import AccessToken, IAtmUI, IBankService, ICashMachine
from atm_controller.core.results import (
    BalanceResult,
    DepositResult,
    MachineDepositResultCode,
    MachineWithdrawResultCode,
    ResultCode,
    ServiceBalanceResult,
    ServiceBalanceResultCode,
    ServiceDepositResult,
    ServiceDepositResultCode,
    ServiceWithdrawResult,
    ServiceWithdrawResultCode,
    WithdrawResult,
)

__all__ = [
    "Card",
    "CardNumber",
    "PIN",
    "ATMController",
    "SessionState",
    "ATMError",
    "AuthorizationError",
    "CardSlotOccupiedError",
    "ConfigError",
    "NoCardError",
    "AccessToken",
    "IAtmUI",
    "IBankService",
    "ICashMachine",
    "BalanceResult",
    "DepositResult",
    "MachineDepositResultCode",
    "MachineWithdrawResultCode",
    "ResultCode",
    "ServiceBalanceResult",
    "ServiceBalanceResultCode",
    "ServiceDepositResult",
    "ServiceDepositResultCode",
    "ServiceWithdrawResult",
    "ServiceWithdrawResultCode",
    "WithdrawResult",
]
