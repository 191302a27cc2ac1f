"""
Text console front end for the ATM controller.

Owns the user dialogue only: it reads choices and amounts, drives
read_pin/validate_pin and turns result codes into messages. Every
decision about the machine and the ledger stays in ATMController.
"""
import asyncio
import logging
from typing import Callable, Optional

from atm_controller.core.errors import AuthorizationError
from atm_controller.core.i18n_manager import I18nManager
from atm_controller.core.interfaces import IAtmUI
from atm_controller.core.results import DepositResult, ServiceBalanceResult, WithdrawResult

logger = logging.getLogger(__name__)

MENU_KEYS = ["menu.balance", "menu.withdraw", "menu.deposit", "menu.exit"]


class ConsoleUI(IAtmUI):

    def __init__(self, i18n: I18nManager, input_func: Optional[Callable[[str], str]] = None,
                 output_func: Optional[Callable[[str], None]] = None, max_pin_trials=3):
        self.i18n = i18n
        self.input_func = input_func or input
        self.output_func = output_func or print
        self.max_pin_trials = max_pin_trials

    def show(self, key: str, **kwargs):
        self.output_func(self.i18n.get(key, **kwargs))

    def show_options_screen(self):
        self.show("menu.title")
        for key in MENU_KEYS:
            self.show(key)

    async def prompt(self, key: str) -> str:
        # Console input blocks, so keep it off the event loop
        answer = await asyncio.to_thread(self.input_func, self.i18n.get(key))
        return answer.strip()

    async def read_amount(self) -> Optional[int]:
        raw = await self.prompt("input.amount")
        try:
            amount = int(raw)
        except ValueError:
            amount = 0
        if not raw.isdecimal() or amount <= 0:
            self.show("msg.invalid_amount")
            return None
        return amount

    async def authorize(self, controller) -> bool:
        """Asks for the PIN until it is accepted or the attempts run out."""
        for attempt in range(1, self.max_pin_trials + 1):
            pin = await controller.read_pin()
            if await controller.validate_pin(pin):
                return True
            remaining = self.max_pin_trials - attempt
            if remaining > 0:
                self.show("msg.pin_rejected", remaining=remaining)
        self.show("msg.pin_locked")
        return False

    def describe(self, result) -> str:
        """User-facing message for a balance, withdraw or deposit result."""
        if getattr(result, "needs_support", False):
            return self.i18n.get("msg.contact_support", balance=result.new_balance)
        if not result.ok:
            return self.i18n.get(f"error.{result.code.value}")
        if isinstance(result, ServiceBalanceResult):
            return self.i18n.get("msg.balance", balance=result.balance)
        if isinstance(result, WithdrawResult):
            return self.i18n.get("msg.withdraw_ok", balance=result.new_balance)
        if isinstance(result, DepositResult):
            return self.i18n.get("msg.deposit_ok", balance=result.new_balance)
        return str(result)

    async def run_session(self, controller):
        """
        Full session for the card currently in the machine:
        PIN entry, then the transaction menu until the user exits.
        The card is always returned at the end.
        """
        try:
            if not await self.authorize(controller):
                return
            while True:
                choice = await self.prompt("input.choice")
                if choice == "1":
                    result = await controller.get_balance()
                elif choice in ("2", "3"):
                    amount = await self.read_amount()
                    if amount is None:
                        continue
                    if choice == "2":
                        result = await controller.withdraw(amount)
                    else:
                        result = await controller.deposit(amount)
                elif choice == "4":
                    break
                else:
                    self.show("msg.invalid_choice")
                    continue
                self.output_func(self.describe(result))
                self.show_options_screen()
        except AuthorizationError:
            logger.warning("Session lost its authorization")
            self.show("error.authorization_error")
        finally:
            controller.exit()
            self.show("msg.goodbye")
