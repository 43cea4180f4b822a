class PrayerTexterError(Exception):
    """Base class for failures that abort processing of a text message."""


class StorageFailure(PrayerTexterError):
    pass


class TransportFailure(PrayerTexterError):
    pass


class PoolEmptyError(PrayerTexterError):
    pass


class ValidationFailure(PrayerTexterError):
    """Bad user input. Handled locally with a reply, never reaches the tracker."""
