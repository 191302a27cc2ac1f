"""
Simulated cash machine

Stands in for the machine driver: a card slot holding at most one card,
a cash bin with a fixed capacity and a PIN source. A fault can be armed
with arm_fault(): the next cash movement jams, which exercises the
"ledger updated, cash not moved" path. A jammed machine refuses every
further transaction until repair().
"""
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from atm_controller.core.card import Card, PIN
from atm_controller.core.errors import CardSlotOccupiedError
from atm_controller.core.interfaces import CardInsertedHandler, ICashMachine
from atm_controller.core.results import MachineDepositResultCode, MachineWithdrawResultCode

logger = logging.getLogger(__name__)

PinSource = Callable[[], Union[PIN, Awaitable[PIN]]]


class SimulatedCashMachine(ICashMachine):

    def __init__(self, pin_source: PinSource, initial_cash=500000, capacity=2000000):
        if initial_cash > capacity:
            raise ValueError("initial_cash exceeds capacity")
        self.pin_source = pin_source
        self.cash = initial_cash
        self.capacity = capacity
        self.is_jammed = False
        self._fault_armed = False
        self._card: Optional[Card] = None
        self._card_inserted_handler: Optional[CardInsertedHandler] = None

    @classmethod
    def from_config(cls, config, pin_source: PinSource):
        machine_conf = config.get("machine") or {}
        return cls(
            pin_source,
            initial_cash=machine_conf.get("initial_cash", 500000),
            capacity=machine_conf.get("capacity", 2000000),
        )

    def insert_card(self, card: Card):
        if self._card is not None:
            raise CardSlotOccupiedError()
        self._card = card
        logger.debug("Card slot: card inserted")
        if self._card_inserted_handler:
            self._card_inserted_handler(card)

    def get_card(self) -> Optional[Card]:
        return self._card

    async def read_pin(self) -> PIN:
        pin = self.pin_source()
        if inspect.isawaitable(pin):
            pin = await pin
        return pin

    def eject_card(self):
        if self._card is not None:
            logger.debug("Card slot: card ejected")
        self._card = None

    def arm_fault(self):
        """The next withdraw or deposit jams the cash bin."""
        self._fault_armed = True

    def repair(self):
        self.is_jammed = False
        self._fault_armed = False

    def _jam_if_armed(self) -> bool:
        if not self._fault_armed:
            return False
        self._fault_armed = False
        self.is_jammed = True
        logger.error("Cash bin jammed")
        return True

    def can_withdraw(self, amount: int) -> MachineWithdrawResultCode:
        if amount <= 0:
            return MachineWithdrawResultCode.ERROR_OTHERS
        if self.is_jammed:
            return MachineWithdrawResultCode.ERROR_MECHANICAL
        if amount > self.cash:
            return MachineWithdrawResultCode.ERROR_CASH_BIN_INSUFFICIENT_FUND
        return MachineWithdrawResultCode.OK

    def can_deposit(self, amount: int) -> MachineDepositResultCode:
        if amount <= 0:
            return MachineDepositResultCode.ERROR_OTHERS
        if self.is_jammed:
            return MachineDepositResultCode.ERROR_MECHANICAL
        if self.cash + amount > self.capacity:
            return MachineDepositResultCode.ERROR_CASH_BIN_FULL
        return MachineDepositResultCode.OK

    async def withdraw(self, amount: int) -> MachineWithdrawResultCode:
        code = self.can_withdraw(amount)
        if not code.is_ok:
            return code
        if self._jam_if_armed():
            return MachineWithdrawResultCode.ERROR_MECHANICAL
        self.cash -= amount
        logger.debug("Dispensed %s, bin now %s", amount, self.cash)
        return code

    async def deposit(self, amount: int) -> MachineDepositResultCode:
        code = self.can_deposit(amount)
        if not code.is_ok:
            return code
        if self._jam_if_armed():
            return MachineDepositResultCode.ERROR_MECHANICAL
        self.cash += amount
        logger.debug("Accepted %s, bin now %s", amount, self.cash)
        return code

    def on_card_inserted(self, handler: CardInsertedHandler):
        self._card_inserted_handler = handler
