"""Helpers shared by the table models."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as a naive UTC datetime.

    Every timestamp column is TIMESTAMP WITHOUT TIME ZONE holding UTC, both in
    the CharterHub tables and in the WordPress-era ones.
    """
    return datetime.now(UTC).replace(tzinfo=None)
