"""Practice dealer: deals simplified stud hands against one connected client."""

from .dealer import DealerError, StudDealer
from .server import PracticeSession

__all__ = ["DealerError", "StudDealer", "PracticeSession"]
