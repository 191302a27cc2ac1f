from dataclasses import dataclass

# Card numbers and PINs are opaque to the controller.
CardNumber = str
PIN = str


@dataclass(frozen=True)
class Card:
    """The card currently held by the machine's card slot."""
    card_number: CardNumber

    def get_card_number(self) -> CardNumber:
        return self.card_number
