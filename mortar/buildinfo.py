"""Build and runtime information about the running service."""

from __future__ import annotations

import json
import socket
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

NOT_PROVIDED = "wasn't provided during build"
_ZERO_TIME_TEXT = "0001-01-01T00:00:00Z"


@dataclass
class _BuildValues:
    git_commit: str = ""
    version: str = ""
    build_timestamp: str = ""
    build_tag: str = ""


def _resolve_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError as err:
        return str(err)


_BUILD = _BuildValues()
_INIT_TIME = datetime.now().astimezone()
_HOSTNAME = _resolve_hostname()


def _format_fraction(value: int, digits: int) -> str:
    whole, fraction = divmod(value, 10**digits)
    fraction_text = str(fraction).zfill(digits).rstrip("0")
    return f"{whole}.{fraction_text}" if fraction_text else str(whole)


def format_duration(delta: timedelta) -> str:
    """Format a duration as ``1h2m3.5s``, ``1.5ms``, ``500µs`` and so on."""
    nanos = ((delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds) * 1000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000_000_000:
        if nanos < 1000:
            text = f"{nanos}ns"
        elif nanos < 1_000_000:
            text = _format_fraction(nanos, 3) + "µs"
        else:
            text = _format_fraction(nanos, 6) + "ms"
        return sign + text
    hours, rest = divmod(nanos, 3600 * 1_000_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000_000)
    seconds = _format_fraction(rest, 9) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return sign + seconds


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME_TEXT
    text = moment.isoformat()
    if moment.tzinfo is not None and moment.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    if moment.microsecond:
        head, _, tail = text.partition(".")
        digits = tail.rstrip("Z+-:0123456789")
        fraction = "".join(ch for ch in tail[:6]).rstrip("0")
        zone = tail[6:]
        text = f"{head}.{fraction}{zone}" if not digits else text
    return text


def _parse_rfc3339(text: str) -> datetime | None:
    candidate = text
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    if "T" not in candidate and "t" not in candidate:
        return None
    try:
        parsed = datetime.fromisoformat(candidate.replace("t", "T"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


@dataclass
class BuildInformation:
    """Static build values plus runtime details of this process."""

    git_commit: str = ""
    version: str = ""
    build_tag: str = ""
    build_time: datetime | None = None
    init_time: datetime | None = None
    up_time: timedelta = timedelta(0)
    hostname: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; empty strings and zero up-time are left out."""
        result: dict[str, Any] = {}
        for key, value in (
            ("git_commit", self.git_commit),
            ("version", self.version),
            ("build_tag", self.build_tag),
        ):
            if value:
                result[key] = value
        result["build_time"] = _format_time(self.build_time)
        result["init_time"] = _format_time(self.init_time)
        if self.up_time:
            result["up_time"] = format_duration(self.up_time)
        if self.hostname:
            result["hostname"] = self.hostname
        return result

    def to_json(self) -> str:
        """Return the information as a JSON document."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


def set_build_values(
    git_commit: str = "",
    version: str = "",
    build_timestamp: str = "",
    build_tag: str = "",
) -> None:
    """Record the values supplied at build time; the timestamp is RFC 3339."""
    _BUILD.git_commit = git_commit
    _BUILD.version = version
    _BUILD.build_timestamp = build_timestamp
    _BUILD.build_tag = build_tag


def get_build_information(include_explanations: bool = False) -> BuildInformation:
    """Return this service's build information.

    With ``include_explanations`` missing build values are replaced by a
    note saying they were not provided.
    """
    info = BuildInformation(
        git_commit=_BUILD.git_commit,
        version=_BUILD.version,
        build_tag=_BUILD.build_tag,
        init_time=_INIT_TIME,
        up_time=datetime.now().astimezone() - _INIT_TIME,
        hostname=_HOSTNAME,
    )
    if _BUILD.build_timestamp:
        info.build_time = _parse_rfc3339(_BUILD.build_timestamp)
    if include_explanations:
        if not _BUILD.git_commit:
            info.git_commit = NOT_PROVIDED
        if not _BUILD.version:
            info.version = NOT_PROVIDED
        if not _BUILD.build_tag:
            info.build_tag = NOT_PROVIDED
    return info