"""Error types raised by pestr. str(err) is the message shown to the user."""


class PestrError(Exception):
    """Base class for user-facing pestr errors."""


class InvalidGeometry(PestrError):
    """Job or machine shape that cannot be reserved (zero counts, too many threads)."""


class InvalidSearchOption(PestrError):
    """Malformed or unknown token in a compact search option string."""


class InvalidConfig(PestrError):
    """Configuration file or environment value of the wrong type."""
