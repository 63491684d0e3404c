from datetime import datetime, timezone

import pytest

from utils.ad_time import (
    FILETIME_NEVER, datetime_to_filetime, filetime_to_datetime, filetime_year,
    parse_generalized_time,
)


def test_filetime_unix_epoch() -> None:
    assert filetime_to_datetime(116444736000000000) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_filetime_conversion_is_reversible() -> None:
    value = datetime(2024, 3, 5, 8, 30, 15, tzinfo=timezone.utc)
    assert filetime_to_datetime(datetime_to_filetime(value)) == value


def test_never_sentinel_overflows_datetime_but_has_a_year() -> None:
    with pytest.raises(OverflowError):
        filetime_to_datetime(FILETIME_NEVER)
    assert filetime_year(FILETIME_NEVER) > 30000


def test_parse_generalized_time() -> None:
    assert parse_generalized_time('20230115103000.0Z') == datetime(2023, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert parse_generalized_time('garbage') is None
    assert parse_generalized_time(None) is None
