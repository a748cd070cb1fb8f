# core/bucket_keys.py
import math
import re
from datetime import datetime, timezone
from typing import Final
from util.errors import InvalidKeyFormat

SEPARATOR: Final[str] = "-"

_TIMESTAMP = re.compile(r"-?[0-9]+")
_GLOB_META = re.compile(r"([*?\[\]\\])")


def unix_seconds(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return math.floor(instant.timestamp())


def bucket_key(namespace: str, instant: datetime) -> str:
    return f"{namespace}{SEPARATOR}{unix_seconds(instant)}"


def discovery_glob(pattern: str) -> str:
    """
    SCAN MATCH glob for every bucket of `pattern`.
    Glob metacharacters in the namespace are escaped so it matches literally.
    """
    escaped = _GLOB_META.sub(r"\\\1", pattern)
    return f"{escaped}{SEPARATOR}*"


def parse_bucket_timestamp(pattern: str, key: str) -> int:
    """
    Inverse of bucket_key: "<pattern>-<int>" -> int.
    Anything else (other prefix, empty or non-numeric tail) is InvalidKeyFormat.
    """
    prefix = f"{pattern}{SEPARATOR}"
    if not key.startswith(prefix):
        raise InvalidKeyFormat(pattern, key)
    tail = key[len(prefix):]
    if not _TIMESTAMP.fullmatch(tail):
        raise InvalidKeyFormat(pattern, key)
    return int(tail)
