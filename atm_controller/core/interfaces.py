from abc import ABC, abstractmethod
from typing import Callable, Optional

from atm_controller.core.card import Card, CardNumber, PIN
from atm_controller.core.results import (
    MachineDepositResultCode,
    MachineWithdrawResultCode,
    ServiceBalanceResult,
    ServiceDepositResult,
    ServiceWithdrawResult,
)

AccessToken = str
CardInsertedHandler = Callable[[Card], None]


class IBankService(ABC):
    """Remote account service. Its ledger is the source of truth for balances."""

    @abstractmethod
    async def validate_pin(self, card_number: CardNumber, encrypted_pin: PIN) -> Optional[AccessToken]:
        """Returns an access token if the PIN is valid for the card."""
        pass

    @abstractmethod
    async def get_balance(self, access_token: AccessToken) -> ServiceBalanceResult:
        pass

    @abstractmethod
    async def withdraw(self, access_token: AccessToken, amount: int) -> ServiceWithdrawResult:
        pass

    @abstractmethod
    async def deposit(self, access_token: AccessToken, amount: int) -> ServiceDepositResult:
        pass


class ICashMachine(ABC):
    """Physical cash machine: card slot, PIN pad and cash bin."""

    @abstractmethod
    def get_card(self) -> Optional[Card]:
        """Currently inserted card, if any."""
        pass

    @abstractmethod
    async def read_pin(self) -> PIN:
        pass

    @abstractmethod
    def eject_card(self):
        pass

    @abstractmethod
    def can_withdraw(self, amount: int) -> MachineWithdrawResultCode:
        """Whether the cash bin can hand out the amount. No side effects."""
        pass

    @abstractmethod
    def can_deposit(self, amount: int) -> MachineDepositResultCode:
        """Whether the cash bin can take the amount, e.g. bin not full. No side effects."""
        pass

    @abstractmethod
    async def withdraw(self, amount: int) -> MachineWithdrawResultCode:
        """Dispenses cash from the bin."""
        pass

    @abstractmethod
    async def deposit(self, amount: int) -> MachineDepositResultCode:
        """Accepts cash into the bin."""
        pass

    @abstractmethod
    def on_card_inserted(self, handler: CardInsertedHandler):
        """Registers the handler called whenever a card is inserted."""
        pass


class IAtmUI(ABC):
    @abstractmethod
    def show_options_screen(self):
        pass
