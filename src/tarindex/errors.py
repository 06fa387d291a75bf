from contextlib import contextmanager
from typing import Any, Iterator, Type, TypeVar, Union

from typing_extensions import Protocol

T = TypeVar("T", bound="Comparable")


class Comparable(Protocol):
    def __lt__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __le__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __gt__(self: T, other: T) -> bool:
        pass  # pragma: no cover

    def __ge__(self: T, other: T) -> bool:
        pass  # pragma: no cover


class TarIndexError(Exception):
    """Base error for all errors in the library."""


class TarIndexInternalError(TarIndexError):
    """An unexpected, internal error - usually a bug in the caller"""


class TarIndexParseError(TarIndexError):
    """An error when parsing a TAR stream."""


class TruncatedReadError(TarIndexParseError):
    """A block was only partially present, or the stream failed to read."""


class MalformedLongNameSizeError(TarIndexParseError):
    """The size of a GNU long name header is unparsable or out of range."""


class MalformedEntrySizeError(TarIndexParseError):
    """The size of a regular header is unparsable."""


class TruncatedLongNameDataError(TarIndexParseError):
    """The stream ended inside the data of a GNU long name."""


class SeekFailureError(TarIndexParseError):
    """The stream could not be positioned past an entry's data."""


def _assert_base(  # pylint: disable=too-many-arguments
    result: bool,
    operator: str,
    name: str,
    expected: Any,
    actual: Any,
    location: Union[int, str],
    error_class: Type[TarIndexError] = TarIndexParseError,
) -> None:
    if not result:
        raise error_class(f"{name}: {actual!r} {operator} {expected!r} (at {location})")


def assert_eq(
    name: str,
    expected: T,
    actual: T,
    location: Union[int, str],
    error_class: Type[TarIndexError] = TarIndexParseError,
) -> None:
    result = actual == expected
    _assert_base(result, "==", name, expected, actual, location, error_class)


def assert_between(  # pylint: disable=too-many-arguments
    name: str,
    expected_low: T,
    expected_high: T,
    actual: T,
    location: Union[int, str],
    error_class: Type[TarIndexError] = TarIndexParseError,
) -> None:
    if expected_low > actual or actual > expected_high:
        raise error_class(
            f"{name}: {expected_low!r} <= {actual!r} <= {expected_high!r} (at {location})"
        )


@contextmanager
def assert_octal(
    name: str,
    actual: bytes,
    location: Union[int, str],
    error_class: Type[TarIndexError] = TarIndexParseError,
) -> Iterator[None]:
    try:
        yield
    except ValueError as e:
        raise error_class(f"{name}: {actual!r} is not octal (at {location})") from e


@contextmanager
def assert_io(
    name: str,
    location: Union[int, str],
    error_class: Type[TarIndexError] = TarIndexParseError,
) -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError) as e:
        raise error_class(f"{name}: {e} (at {location})") from e
