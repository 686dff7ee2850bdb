from .player import Category, Player, PlayingStyle, RegistrationState

__all__ = [
    "Player",
    "Category",
    "PlayingStyle",
    "RegistrationState",
]
