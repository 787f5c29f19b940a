"""Search SteamGridDB for game artwork and turn it into title icons."""

__version__ = "0.1.0"

__all__ = ["client", "config", "http", "sgdb", "thread", "utils"]