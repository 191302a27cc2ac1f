import hashlib
import json
import logging
import os
import secrets
from typing import Dict, Optional

from atm_controller.core.card import CardNumber, PIN
from atm_controller.core.interfaces import AccessToken, IBankService
from atm_controller.core.results import (
    ServiceBalanceResult,
    ServiceBalanceResultCode,
    ServiceDepositResult,
    ServiceDepositResultCode,
    ServiceWithdrawResult,
    ServiceWithdrawResultCode,
)

logger = logging.getLogger(__name__)

DEMO_CARD_NUMBER = "111222333444"
DEMO_PIN = "1234"


class AccountManager(IBankService):
    """
    Local account ledger backed by a JSON file.

    Manages loading, saving, PIN authentication and balance updates.
    Access tokens live in memory only and map to the card number they
    were issued for.
    """
    DATA_FILE = "data/accounts.json"

    def __init__(self, config=None, data_file=None):
        self.accounts: Dict[str, dict] = {}
        self.tokens: Dict[AccessToken, CardNumber] = {}
        self.salt = "default_salt"
        self.max_amount = 999999
        self.max_pin_trials = 3
        self.data_file = data_file or self.DATA_FILE

        if config:
            security = config.get("security") or {}
            self.salt = security.get("pin_salt", self.salt)
            self.max_amount = security.get("max_amount", self.max_amount)
            self.max_pin_trials = security.get("max_pin_trials", self.max_pin_trials)
            if data_file is None:
                accounts_conf = config.get("accounts") or {}
                self.data_file = accounts_conf.get("data_file", self.DATA_FILE)

        data_dir = os.path.dirname(self.data_file)
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)

        self.load_data()

    def load_data(self):
        """Reads the ledger from the JSON file, seeding a demo account if it is missing."""
        if not os.path.exists(self.data_file):
            self.accounts = {
                DEMO_CARD_NUMBER: {
                    "name": "Demo Taro",
                    "pin_hash": self._hash_pin(DEMO_PIN),
                    "balance": 100000,
                    "trials": 0,
                    "is_frozen": False
                }
            }
            self.save_data()
            logger.info("Seeded demo ledger at %s", self.data_file)
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed to read ledger %s", self.data_file)
            raise

        self.accounts = data.get("accounts", {})
        # Older files may lack these fields
        for acc in self.accounts.values():
            acc.setdefault("trials", 0)
            acc.setdefault("is_frozen", False)

    def save_data(self):
        """Writes the current ledger to the JSON file."""
        try:
            with open(self.data_file, "w", encoding="utf-8") as f:
                json.dump(
                    {"accounts": self.accounts},
                    f,
                    indent=4,
                    ensure_ascii=False
                )
        except OSError:
            logger.exception("Failed to write ledger %s", self.data_file)
            raise

    def _hash_pin(self, pin):
        """Salted SHA256 of a PIN."""
        salted_pin = f"{self.salt}{pin}"
        return hashlib.sha256(salted_pin.encode()).hexdigest()

    def _account_for(self, access_token) -> Optional[dict]:
        card_number = self.tokens.get(access_token)
        if card_number is None:
            return None
        return self.accounts.get(card_number)

    def _is_valid_amount(self, amount) -> bool:
        return 0 < amount <= self.max_amount

    async def validate_pin(self, card_number: CardNumber, encrypted_pin: PIN) -> Optional[AccessToken]:
        if card_number not in self.accounts:
            logger.info("PIN check for unknown card")
            return None

        acc = self.accounts[card_number]
        if acc.get("is_frozen", False):
            logger.info("PIN check for frozen account")
            return None

        if acc["pin_hash"] != self._hash_pin(encrypted_pin):
            acc["trials"] += 1
            remaining = self.max_pin_trials - acc["trials"]
            if remaining <= 0:
                acc["is_frozen"] = True
                logger.warning("Account frozen after %d failed PIN attempts", acc["trials"])
            self.save_data()
            return None

        acc["trials"] = 0
        self.save_data()
        # One live token per card: a new session invalidates the previous one
        self.tokens = {t: c for t, c in self.tokens.items() if c != card_number}
        access_token = secrets.token_hex(16)
        self.tokens[access_token] = card_number
        return access_token

    def is_frozen(self, card_number):
        if card_number in self.accounts:
            return self.accounts[card_number].get("is_frozen", False)
        return False

    def get_account_name(self, card_number):
        if card_number in self.accounts:
            return self.accounts[card_number]["name"]
        return None

    def create_account(self, card_number, name, pin, initial_balance=0):
        if card_number in self.accounts:
            raise ValueError(f"Account already exists: {card_number}")

        self.accounts[card_number] = {
            "name": name,
            "pin_hash": self._hash_pin(pin),
            "balance": initial_balance,
            "trials": 0,
            "is_frozen": False
        }
        self.save_data()
        return card_number

    async def get_balance(self, access_token: AccessToken) -> ServiceBalanceResult:
        acc = self._account_for(access_token)
        if acc is None:
            return ServiceBalanceResult(code=ServiceBalanceResultCode.AUTHORIZATION_ERROR)
        if acc.get("is_frozen", False):
            return ServiceBalanceResult(code=ServiceBalanceResultCode.ERROR_OTHERS)
        return ServiceBalanceResult(code=ServiceBalanceResultCode.OK, balance=acc["balance"])

    async def withdraw(self, access_token: AccessToken, amount: int) -> ServiceWithdrawResult:
        acc = self._account_for(access_token)
        if acc is None:
            return ServiceWithdrawResult(code=ServiceWithdrawResultCode.AUTHORIZATION_ERROR)
        if acc.get("is_frozen", False) or not self._is_valid_amount(amount):
            return ServiceWithdrawResult(code=ServiceWithdrawResultCode.ERROR_OTHERS)
        if acc["balance"] < amount:
            return ServiceWithdrawResult(code=ServiceWithdrawResultCode.ERROR_INSUFFICIENT_BALANCE)

        acc["balance"] -= amount
        self.save_data()
        return ServiceWithdrawResult(code=ServiceWithdrawResultCode.OK, new_balance=acc["balance"])

    async def deposit(self, access_token: AccessToken, amount: int) -> ServiceDepositResult:
        acc = self._account_for(access_token)
        if acc is None:
            return ServiceDepositResult(code=ServiceDepositResultCode.AUTHORIZATION_ERROR)
        if acc.get("is_frozen", False) or not self._is_valid_amount(amount):
            return ServiceDepositResult(code=ServiceDepositResultCode.ERROR_OTHERS)

        acc["balance"] += amount
        self.save_data()
        return ServiceDepositResult(code=ServiceDepositResultCode.OK, new_balance=acc["balance"])
