class RotorSimError(Exception):
    """Base class for every error the simulator reports to the user."""


class ConfigurationError(RotorSimError):
    """Malformed configuration, rotor catalog, settings line or plugboard."""


class AlphabetError(RotorSimError):
    """A symbol or index that is not part of the configured alphabet."""


class UsageError(RotorSimError):
    """Bad command-line usage or an unreadable/unwritable path."""


class RotorCapabilityError(RotorSimError):
    """An operation the rotor variant does not support (e.g. advancing a reflector)."""
