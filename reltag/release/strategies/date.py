"""Date strategy: name the tag after today's date.

Formats use moment-style tokens so existing configs keep working:
``YYYY YY MM M DD D HH H mm m ss s``. Text inside ``[brackets]`` is literal.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from reltag.release.errors import ReleaseAbort
from reltag.release.model import OptionSpec, Project

DEFAULT_FORMAT = "YYYY.MM.DD"
DEFAULT_TIMEZONE = "UTC"

AVAILABLE_OPTIONS = (
    OptionSpec(
        "format",
        "str",
        default=DEFAULT_FORMAT,
        description="format used to generate the tag",
        config_allowed=True,
    ),
    OptionSpec(
        "timezone",
        "str",
        default=DEFAULT_TIMEZONE,
        description="timezone to consider the current date in",
        config_allowed=True,
    ),
)

_TOKEN_RE = re.compile(r"\[[^\]]*\]|YYYY|YY|MM|M|DD|D|HH|H|mm|m|ss|s")

_TOKENS: dict[str, Callable[[datetime], str]] = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MM": lambda d: f"{d.month:02d}",
    "M": lambda d: str(d.month),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
}


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_date(moment: datetime, fmt: str) -> str:
    def repl(m: re.Match[str]) -> str:
        token = m.group(0)
        if token.startswith("["):
            return token[1:-1]
        return _TOKENS[token](moment)

    return _TOKEN_RE.sub(repl, fmt)


def _append_patch(tag: str, patch: int) -> str:
    return f"{tag}.{patch}" if patch else tag


def get_next_tag(
    project: Project,
    tags: Sequence[str],
    options: Mapping[str, object],
    *,
    now: Callable[[], datetime] = utc_now,
) -> str:
    fmt = options.get("format") or DEFAULT_FORMAT
    timezone = options.get("timezone") or DEFAULT_TIMEZONE

    try:
        zone = ZoneInfo(str(timezone))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ReleaseAbort(f"Unknown timezone: '{timezone}'") from e

    tag_name = format_date(now().astimezone(zone), str(fmt))

    existing = set(tags)
    patch = 0
    while _append_patch(tag_name, patch) in existing:
        patch += 1
    return _append_patch(tag_name, patch)
