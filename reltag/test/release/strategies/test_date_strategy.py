from __future__ import annotations

from datetime import UTC, datetime

import pytest

from reltag.release.errors import ReleaseAbort
from reltag.release.model import Project
from reltag.release.strategies.date import format_date, get_next_tag

# 2015-01-02 03:04:05 UTC; still January 1st in Los Angeles.
NOW = datetime(2015, 1, 2, 3, 4, 5, tzinfo=UTC)


def _now() -> datetime:
    return NOW


def test_default_format_in_utc(project: Project) -> None:
    assert get_next_tag(project, [], {}, now=_now) == "2015.01.02"


def test_custom_format_and_timezone(project: Project) -> None:
    options = {"format": "YYYY-MM-DD", "timezone": "America/Los_Angeles"}
    assert get_next_tag(project, [], options, now=_now) == "2015-01-01"


def test_first_collision_gets_suffix_one(project: Project) -> None:
    assert get_next_tag(project, ["2015.01.02"], {}, now=_now) == "2015.01.02.1"


def test_second_collision_gets_suffix_two(project: Project) -> None:
    tags = ["2015.01.02", "2015.01.02.1", "v1.0.0"]
    assert get_next_tag(project, tags, {}, now=_now) == "2015.01.02.2"


def test_unknown_timezone_aborts(project: Project) -> None:
    with pytest.raises(ReleaseAbort, match="Unknown timezone"):
        get_next_tag(project, [], {"timezone": "Mars/Olympus_Mons"}, now=_now)


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        ("YYYY.MM.DD", "2015.01.02"),
        ("YY.M.D", "15.1.2"),
        ("YYYYMMDD-HHmmss", "20150102-030405"),
        ("H:m:s", "3:4:5"),
        ("[release-]YYYY.MM", "release-2015.01"),
    ],
)
def test_format_date_tokens(fmt: str, expected: str) -> None:
    assert format_date(NOW, fmt) == expected
