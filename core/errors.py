# core/errors.py

"""Exception hierarchy for the cache deserializer."""


class DeserializeError(Exception):
    """Base class for all deserializer errors."""
    pass


class UsageError(DeserializeError):
    """Raised when the command line cannot be honored."""
    pass


class PathError(DeserializeError):
    """Raised when an input is missing or the output already exists."""
    pass


class CacheIOError(DeserializeError):
    """Raised when a seek, read, write or truncate fails on an open file."""

    def __init__(self, msg="", name="", offset=None, operation=""):
        super().__init__(msg)
        self.name = name
        self.offset = offset
        self.operation = operation


class ShortPayloadRead(CacheIOError):
    """Raised when the source runs out before a part's payload is complete."""

    def __init__(self, name="", offset=None, wanted=0, got=0):
        super().__init__(
            f"failed to read part of size {wanted} from '{name}'@{offset}, "
            f"only {got} bytes read",
            name=name, offset=offset, operation="read",
        )
        self.wanted = wanted
        self.got = got


class TruncatedRead(DeserializeError):
    """Raised by the header decoder when fewer bytes remain than a field needs."""

    def __init__(self, name="", offset=0, wanted=0, got=0):
        super().__init__(
            f"reading {wanted} bytes from '{name}'@{offset} failed, only {got} available"
        )
        self.name = name
        self.offset = offset
        self.wanted = wanted
        self.got = got
