"""Authentication ticket model.

Times are stored as legacy ticks: 100 ns intervals since
0001-01-01T00:00:00 UTC. ``datetime`` only resolves microseconds, so the
tick counts stay authoritative and every datetime attribute is a derived
view. Local-time views are computed from UTC and never fed back.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from forms_ticket.core.constants import (
    DEFAULT_COOKIE_PATH,
    DEFAULT_TICKET_VERSION,
    MAX_TICKS,
    TICKS_PER_MICROSECOND,
    TICKS_PER_SECOND,
)

TICKS_EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)


def datetime_to_ticks(value: datetime) -> int:
    """Convert a datetime to UTC ticks.

    Parameters
    ----------
    value : datetime
        Aware datetime, or naive datetime interpreted as local time.

    Returns
    -------
    int
        Ticks since 0001-01-01T00:00:00 UTC.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    delta = value.astimezone(timezone.utc) - TICKS_EPOCH
    seconds = delta.days * 86400 + delta.seconds
    return seconds * TICKS_PER_SECOND + delta.microseconds * TICKS_PER_MICROSECOND


def ticks_to_datetime(ticks: int) -> datetime:
    """Convert UTC ticks to an aware UTC datetime.

    The sub-microsecond remainder is truncated.

    Raises
    ------
    ValueError
        If ticks fall outside the representable range.
    """
    _check_ticks(ticks)
    return TICKS_EPOCH + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _check_ticks(ticks: int) -> None:
    if not isinstance(ticks, int) or isinstance(ticks, bool):
        raise TypeError(f"Ticks must be int, got {type(ticks).__name__}")
    if ticks < 0 or ticks > MAX_TICKS:
        raise ValueError(f"Ticks out of range: {ticks}")


@dataclass(frozen=True)
class Ticket:
    """Forms authentication ticket.

    Attributes
    ----------
    version : int
        Caller metadata; only the low byte is serialized.
    name : str
        User name the ticket was issued to.
    issue_date_ticks : int
        Issue time in UTC ticks.
    expiration_ticks : int
        Expiration time in UTC ticks.
    is_persistent : bool
        True if a durable cookie was issued.
    user_data : str
        Opaque application payload.
    cookie_path : str
        Cookie path the ticket was issued for.

    Notes
    -----
    Use ``Ticket.create`` to build a ticket from datetimes.
    """

    version: int
    name: str
    issue_date_ticks: int
    expiration_ticks: int
    is_persistent: bool = False
    user_data: str = ""
    cookie_path: str = DEFAULT_COOKIE_PATH

    def __post_init__(self) -> None:
        _check_ticks(self.issue_date_ticks)
        _check_ticks(self.expiration_ticks)

    @classmethod
    def create(
        cls,
        version: int,
        name: str,
        issue_date: datetime,
        expiration: datetime,
        is_persistent: bool = False,
        user_data: str = "",
        cookie_path: str = DEFAULT_COOKIE_PATH,
    ) -> "Ticket":
        """Build a ticket from datetimes.

        Parameters
        ----------
        version : int
            Ticket version metadata.
        name : str
            User name.
        issue_date : datetime
            Issue time. Naive values are treated as local time.
        expiration : datetime
            Expiration time. Naive values are treated as local time.
        is_persistent : bool, optional
            Durable cookie flag.
        user_data : str, optional
            Application payload.
        cookie_path : str, optional
            Cookie path, default "/".

        Returns
        -------
        Ticket
            New ticket with times normalized to UTC ticks.
        """
        return cls(
            version=version,
            name=name,
            issue_date_ticks=datetime_to_ticks(issue_date),
            expiration_ticks=datetime_to_ticks(expiration),
            is_persistent=is_persistent,
            user_data=user_data,
            cookie_path=cookie_path,
        )

    @classmethod
    def issue(
        cls,
        name: str,
        timeout: timedelta,
        is_persistent: bool = False,
        user_data: str = "",
        cookie_path: str = DEFAULT_COOKIE_PATH,
        now: Optional[datetime] = None,
    ) -> "Ticket":
        """Issue a version 2 ticket that is valid for ``timeout`` from now."""
        issued = now if now is not None else utc_now()
        return cls.create(
            DEFAULT_TICKET_VERSION,
            name,
            issued,
            issued + timeout,
            is_persistent=is_persistent,
            user_data=user_data,
            cookie_path=cookie_path,
        )

    @property
    def issue_date_utc(self) -> datetime:
        """Return the issue time as an aware UTC datetime."""
        return ticks_to_datetime(self.issue_date_ticks)

    @property
    def expiration_utc(self) -> datetime:
        """Return the expiration time as an aware UTC datetime."""
        return ticks_to_datetime(self.expiration_ticks)

    @property
    def issue_date(self) -> datetime:
        """Return the issue time in the local timezone."""
        return self.issue_date_utc.astimezone()

    @property
    def expiration(self) -> datetime:
        """Return the expiration time in the local timezone."""
        return self.expiration_utc.astimezone()

    @property
    def lifetime(self) -> timedelta:
        """Return the interval between issue and expiration."""
        delta_ticks = self.expiration_ticks - self.issue_date_ticks
        return timedelta(microseconds=delta_ticks // TICKS_PER_MICROSECOND)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the ticket has expired.

        Parameters
        ----------
        now : datetime, optional
            Reference time (defaults to the current time). Compared in UTC.

        Returns
        -------
        bool
            True if ``now`` is strictly after the expiration time.
        """
        reference = now if now is not None else utc_now()
        return datetime_to_ticks(reference) > self.expiration_ticks

    @property
    def expired(self) -> bool:
        """True if the ticket has expired as of the current UTC time."""
        return self.is_expired()

    def renew_if_old(self, now: Optional[datetime] = None) -> "Ticket":
        """Slide the validity window once half of the lifetime has elapsed.

        Parameters
        ----------
        now : datetime, optional
            Reference time (defaults to the current time).

        Returns
        -------
        Ticket
            This ticket if less than half of its lifetime has elapsed;
            otherwise a copy issued at ``now`` with the same lifetime.
        """
        reference = now if now is not None else utc_now()
        now_ticks = datetime_to_ticks(reference)
        age = now_ticks - self.issue_date_ticks
        remaining = self.expiration_ticks - now_ticks
        if remaining > age:
            return self

        total = self.expiration_ticks - self.issue_date_ticks
        return replace(
            self,
            issue_date_ticks=now_ticks,
            expiration_ticks=now_ticks + total,
        )
