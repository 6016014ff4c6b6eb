"""Error taxonomy for the booking bot.

None of these are fatal to the process. Validation and capacity errors are
recovered inside the dialogue; delivery and persistence errors are logged
by whoever talks to the outside world.
"""


class BookingBotError(Exception):
    """Base class for all bot errors."""


class ValidationError(BookingBotError):
    """User input could not be parsed for the current dialogue step."""


class CapacityExceeded(BookingBotError):
    """The requested slot has no seats left."""

    def __init__(self, unit: str, date: str, time: str) -> None:
        super().__init__(f"Slot {unit} {date} {time} is full")
        self.unit = unit
        self.date = date
        self.time = time


class DeliveryError(BookingBotError):
    """A reply or staff notification could not be delivered."""


class PersistenceError(BookingBotError):
    """The durable ledger copy could not be read or written."""
