"""Exception types raised by the star simulation."""


class StarSimError(Exception):
    """Base class for all simulation errors."""


class ConfigurationError(StarSimError, ValueError):
    """Raised when bodies, domains or run settings are invalid.

    Construction-time validation raises this so that a bad setup never
    reaches the step loop.
    """


class NumericalInstabilityError(StarSimError, ArithmeticError):
    """Raised when an integration step produces non-finite values."""
