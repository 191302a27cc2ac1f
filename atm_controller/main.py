"""
ATM simulator - entry point

Wires the JSON ledger, the simulated cash machine and the console UI
around one ATMController and runs a single card session.
"""
import argparse
import asyncio
import getpass
import logging
import sys

from atm_controller.core.account_manager import DEMO_CARD_NUMBER, AccountManager
from atm_controller.core.card import Card
from atm_controller.core.cash_machine import SimulatedCashMachine
from atm_controller.core.config_loader import ConfigLoader
from atm_controller.core.controller import ATMController
from atm_controller.core.errors import ATMError
from atm_controller.core.i18n_manager import I18nManager
from atm_controller.ui.console import ConsoleUI

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run one ATM card session on the console.")
    parser.add_argument("--config", help="path to an atm_config.yml")
    parser.add_argument("--card", default=DEMO_CARD_NUMBER, help="card number to insert")
    parser.add_argument("--lang", help="message language (EN or JP)")
    parser.add_argument("--log-level", help="overrides logging.level from the config")
    return parser.parse_args(argv)


def setup_logging(config, level_override=None):
    log_conf = config.get("logging") or {}
    level = (level_override or log_conf.get("level", "WARNING")).upper()
    logging.basicConfig(level=level, format=log_conf.get("format", DEFAULT_LOG_FORMAT))


def build_controller(config, ui: ConsoleUI):
    pin_prompt = ui.i18n.get("input.pin")
    machine = SimulatedCashMachine.from_config(
        config,
        pin_source=lambda: asyncio.to_thread(getpass.getpass, pin_prompt),
    )
    service = AccountManager(config)
    return ATMController(machine, service, ui), machine


def main(argv=None):
    """
    Application Entry Point
    """
    args = parse_args(argv)

    try:
        loader = ConfigLoader()
        if args.config:
            loader.load(args.config)
        config = loader.config
        setup_logging(config, args.log_level)

        security = config.get("security") or {}
        ui = ConsoleUI(I18nManager(args.lang), max_pin_trials=security.get("max_pin_trials", 3))
        controller, machine = build_controller(config, ui)
    except (ATMError, OSError, ValueError) as e:
        # unreadable config, message catalog or ledger
        print(f"Startup error: {e}", file=sys.stderr)
        return 1

    ui.show("msg.welcome", card=args.card)
    machine.insert_card(Card(args.card))
    try:
        asyncio.run(ui.run_session(controller))
    except KeyboardInterrupt:
        controller.exit()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
