# core/codec.py
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from model.trigger import Trigger
from util.errors import EncodeFailure, MalformedRecord


def encode(trigger: Trigger) -> bytes:
    """
    Canonical wire form: compact JSON, fields in declaration order,
    scheduled_at as ISO-8601 UTC seconds. Equal records -> equal bytes,
    which SADD dedup and SREM-by-value rely on.
    """
    try:
        return trigger.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, UnicodeEncodeError) as e:
        raise EncodeFailure(f"unable to encode trigger: {e}") from e


def decode(raw: bytes | str) -> Trigger:
    try:
        return Trigger.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedRecord(f"unable to decode trigger: {e.error_count()} error(s)") from e
    except (ValueError, OverflowError) as e:
        raise MalformedRecord(f"unable to decode trigger: {e}") from e
