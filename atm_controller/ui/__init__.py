from atm_controller.ui.console import ConsoleUI

__all__ = ["ConsoleUI"]
