"""
ATM controller

Sequences the cash machine and the account service for one card session.

Withdraw and deposit run in three phases, each one short-circuiting the next:
  1. machine feasibility check (no side effects)
  2. ledger update on the account service
  3. physical cash movement on the machine
Once phase 2 has committed, the new balance is always returned, even when
phase 3 fails. A non-OK code together with a balance means the customer has
to contact support.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from atm_controller.core.card import Card, PIN
from atm_controller.core.errors import AuthorizationError, NoCardError
from atm_controller.core.interfaces import AccessToken, IAtmUI, IBankService, ICashMachine
from atm_controller.core.results import BalanceResult, DepositResult, WithdrawResult

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNAUTHORIZED = "unauthorized"
    AUTHORIZED = "authorized"


class ATMController:
    """
    Holds the authorization state of the current card session and drives
    every transaction against the machine and the account service.
    """

    def __init__(self, atm: ICashMachine, service: IBankService, ui: IAtmUI):
        self.atm = atm
        self.service = service
        self.ui = ui

        self._access_token: Optional[AccessToken] = None
        # Callers are expected to serialize operations; the lock keeps
        # overlapping calls from interleaving their phases anyway.
        self._lock = asyncio.Lock()

        self.atm.on_card_inserted(self._handle_card_inserted)

    @property
    def state(self) -> SessionState:
        if self._access_token is None:
            return SessionState.UNAUTHORIZED
        return SessionState.AUTHORIZED

    @property
    def is_authorized(self) -> bool:
        return self.state is SessionState.AUTHORIZED

    def _handle_card_inserted(self, card: Card):
        """
        Presents the options screen for a newly inserted card.

        Normally the session is already closed here, since exit() runs
        before a card leaves the slot. If a card was pulled without exit(),
        the leftover token is dropped so it is never reused for a different
        card. This never authorizes: that still takes validate_pin().
        """
        if self._access_token is not None:
            logger.warning("Card inserted while a session was open; discarding its token")
            self._access_token = None
        logger.info("Card inserted: %s", _mask(card.card_number))
        self.ui.show_options_screen()

    def _validate(self) -> AccessToken:
        if self._access_token is None:
            logger.warning("Rejected operation without access token")
            raise AuthorizationError("invalid access token")
        return self._access_token

    async def read_pin(self) -> PIN:
        return await self.atm.read_pin()

    async def validate_pin(self, pin: PIN) -> bool:
        card = self.atm.get_card()
        if card is None:
            raise NoCardError("no card in ATM")

        access_token = await self.service.validate_pin(card.card_number, pin)
        if not access_token:
            logger.info("PIN rejected for card %s", _mask(card.card_number))
            return False

        self._access_token = access_token
        logger.info("Session authorized for card %s", _mask(card.card_number))
        return True

    async def get_balance(self) -> BalanceResult:
        token = self._validate()
        async with self._lock:
            return await self.service.get_balance(token)

    async def withdraw(self, amount: int) -> WithdrawResult:
        token = self._validate()
        async with self._lock:
            # See if the machine can fulfill the request first.
            machine_code = self.atm.can_withdraw(amount)
            if not machine_code.is_ok:
                logger.debug("withdraw(%s) blocked by machine: %s", amount, machine_code.name)
                return WithdrawResult(code=machine_code)

            service_result = await self.service.withdraw(token, amount)
            if not service_result.ok:
                logger.debug("withdraw(%s) rejected by service: %s", amount, service_result.code.name)
                return WithdrawResult(code=service_result.code, new_balance=service_result.new_balance)

            machine_code = await self.atm.withdraw(amount)
            if not machine_code.is_ok:
                logger.error(
                    "Ledger debited %s but dispense failed: %s (new balance %s)",
                    amount, machine_code.name, service_result.new_balance,
                )
            return WithdrawResult(code=machine_code, new_balance=service_result.new_balance)

    async def deposit(self, amount: int) -> DepositResult:
        token = self._validate()
        async with self._lock:
            machine_code = self.atm.can_deposit(amount)
            if not machine_code.is_ok:
                logger.debug("deposit(%s) blocked by machine: %s", amount, machine_code.name)
                return DepositResult(code=machine_code)

            service_result = await self.service.deposit(token, amount)
            if not service_result.ok:
                logger.debug("deposit(%s) rejected by service: %s", amount, service_result.code.name)
                return DepositResult(code=service_result.code, new_balance=service_result.new_balance)

            machine_code = await self.atm.deposit(amount)
            if not machine_code.is_ok:
                logger.error(
                    "Ledger credited %s but cash intake failed: %s (new balance %s)",
                    amount, machine_code.name, service_result.new_balance,
                )
            return DepositResult(code=machine_code, new_balance=service_result.new_balance)

    def exit(self):
        """Ends the session and returns the card. Safe to call repeatedly."""
        if self._access_token is not None:
            logger.info("Session closed")
        self._access_token = None
        self.atm.eject_card()


def _mask(card_number: str) -> str:
    """Keeps the last four digits of a card number for log output."""
    if len(card_number) <= 4:
        return card_number
    return "*" * (len(card_number) - 4) + card_number[-4:]
