import json
import os
import sys
import tempfile
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from atm_controller.core.account_manager import DEMO_CARD_NUMBER, DEMO_PIN, AccountManager
from atm_controller.core.results import (
    ServiceBalanceResultCode,
    ServiceDepositResultCode,
    ServiceWithdrawResultCode,
)

CARD = "400011112222"
PIN = "4321"


class TestAccountManager(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_file = os.path.join(self.tmp.name, "data", "accounts.json")
        config = {"security": {"pin_salt": "test_salt", "max_pin_trials": 3, "max_amount": 1000}}
        self.manager = AccountManager(config, data_file=self.data_file)
        self.manager.create_account(CARD, "Test User", PIN, initial_balance=100)

    def tearDown(self):
        self.tmp.cleanup()

    async def test_demo_account_seeded(self):
        self.assertTrue(os.path.exists(self.data_file))
        token = await self.manager.validate_pin(DEMO_CARD_NUMBER, DEMO_PIN)
        self.assertIsNotNone(token)

    async def test_pin_is_stored_hashed(self):
        with open(self.data_file, encoding="utf-8") as f:
            stored = json.load(f)["accounts"][CARD]
        self.assertNotEqual(stored["pin_hash"], PIN)
        self.assertEqual(len(stored["pin_hash"]), 64)

    async def test_validate_pin(self):
        self.assertIsNone(await self.manager.validate_pin(CARD, "0000"))
        self.assertIsNone(await self.manager.validate_pin("unknown", PIN))
        token = await self.manager.validate_pin(CARD, PIN)
        self.assertIsNotNone(token)
        self.assertEqual(self.manager.accounts[CARD]["trials"], 0)

    async def test_tokens_are_unique_per_validation(self):
        first = await self.manager.validate_pin(CARD, PIN)
        second = await self.manager.validate_pin(CARD, PIN)
        self.assertNotEqual(first, second)

    async def test_account_frozen_after_max_trials(self):
        for _ in range(3):
            self.assertIsNone(await self.manager.validate_pin(CARD, "0000"))
        self.assertTrue(self.manager.is_frozen(CARD))
        # correct PIN no longer helps
        self.assertIsNone(await self.manager.validate_pin(CARD, PIN))

    async def test_unknown_token(self):
        self.assertEqual((await self.manager.get_balance("nope")).code,
                         ServiceBalanceResultCode.AUTHORIZATION_ERROR)
        self.assertEqual((await self.manager.withdraw("nope", 10)).code,
                         ServiceWithdrawResultCode.AUTHORIZATION_ERROR)
        self.assertEqual((await self.manager.deposit("nope", 10)).code,
                         ServiceDepositResultCode.AUTHORIZATION_ERROR)

    async def test_withdraw_and_deposit(self):
        token = await self.manager.validate_pin(CARD, PIN)

        w = await self.manager.withdraw(token, 12)
        self.assertEqual(w.code, ServiceWithdrawResultCode.OK)
        self.assertEqual(w.new_balance, 88)

        d = await self.manager.deposit(token, 23)
        self.assertEqual(d.code, ServiceDepositResultCode.OK)
        self.assertEqual(d.new_balance, 111)

        b = await self.manager.get_balance(token)
        self.assertEqual(b.balance, 111)

    async def test_withdraw_insufficient_balance(self):
        token = await self.manager.validate_pin(CARD, PIN)
        w = await self.manager.withdraw(token, 101)
        self.assertEqual(w.code, ServiceWithdrawResultCode.ERROR_INSUFFICIENT_BALANCE)
        self.assertIsNone(w.new_balance)
        self.assertEqual((await self.manager.get_balance(token)).balance, 100)

    async def test_invalid_amounts(self):
        token = await self.manager.validate_pin(CARD, PIN)
        self.assertEqual((await self.manager.withdraw(token, 0)).code, ServiceWithdrawResultCode.ERROR_OTHERS)
        self.assertEqual((await self.manager.deposit(token, -5)).code, ServiceDepositResultCode.ERROR_OTHERS)
        self.assertEqual((await self.manager.deposit(token, 1001)).code, ServiceDepositResultCode.ERROR_OTHERS)

    async def test_new_session_invalidates_earlier_token(self):
        old_token = await self.manager.validate_pin(CARD, PIN)
        for _ in range(2):
            new_token = await self.manager.validate_pin(CARD, PIN)

        self.assertEqual((await self.manager.withdraw(old_token, 10)).code,
                         ServiceWithdrawResultCode.AUTHORIZATION_ERROR)
        self.assertEqual((await self.manager.get_balance(old_token)).code,
                         ServiceBalanceResultCode.AUTHORIZATION_ERROR)
        self.assertEqual((await self.manager.get_balance(new_token)).balance, 100)
        self.assertEqual(list(self.manager.tokens.values()), [CARD])

    async def test_tokens_are_per_card(self):
        card_token = await self.manager.validate_pin(CARD, PIN)
        demo_token = await self.manager.validate_pin(DEMO_CARD_NUMBER, DEMO_PIN)
        self.assertTrue((await self.manager.get_balance(card_token)).ok)
        self.assertTrue((await self.manager.get_balance(demo_token)).ok)

    async def test_ledger_persists(self):
        token = await self.manager.validate_pin(CARD, PIN)
        await self.manager.withdraw(token, 40)

        reloaded = AccountManager({"security": {"pin_salt": "test_salt"}}, data_file=self.data_file)
        self.assertEqual(reloaded.accounts[CARD]["balance"], 60)
        self.assertEqual(reloaded.get_account_name(CARD), "Test User")
        # tokens are not persisted
        self.assertEqual((await reloaded.get_balance(token)).code,
                         ServiceBalanceResultCode.AUTHORIZATION_ERROR)

    def test_duplicate_account(self):
        with self.assertRaises(ValueError):
            self.manager.create_account(CARD, "Someone", "1111")


if __name__ == "__main__":
    unittest.main()
