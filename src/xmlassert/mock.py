"""Mock value synthesis.

A spec is free text with ``@placeholder`` or ``@placeholder(args)`` tokens,
for example ``order-@integer(1000,9999)`` or ``@pick(red,green,blue)``.
Each token is replaced by a generated value; text around the tokens and
unknown placeholders are kept as they are.
"""

from __future__ import annotations

import logging
import random
import re
import string
import time
import uuid
from datetime import datetime, timedelta
from typing import Callable

from xmlassert.variables import VariableStore

_PLACEHOLDER_RE = re.compile(r"@([A-Za-z_]+)(?:\(([^)]*)\))?")

Generator = Callable[[list[str], random.Random], str]


def _int_arg(args: list[str], pos: int, default: int, placeholder: str) -> int:
    if len(args) <= pos or args[pos] == "":
        return default
    try:
        return int(args[pos])
    except ValueError:
        raise ValueError(f"@{placeholder} expects integer arguments, got '{args[pos]}'") from None


def _float_arg(args: list[str], pos: int, default: float, placeholder: str) -> float:
    if len(args) <= pos or args[pos] == "":
        return default
    try:
        return float(args[pos])
    except ValueError:
        raise ValueError(f"@{placeholder} expects numeric arguments, got '{args[pos]}'") from None


def _integer(args: list[str], rng: random.Random) -> str:
    low = _int_arg(args, 0, 0, "integer")
    high = _int_arg(args, 1, 10000, "integer")
    if low > high:
        raise ValueError(f"@integer range is empty: {low} > {high}")
    return str(rng.randint(low, high))


def _float(args: list[str], rng: random.Random) -> str:
    low = _float_arg(args, 0, 0.0, "float")
    high = _float_arg(args, 1, 10000.0, "float")
    digits = _int_arg(args, 2, 2, "float")
    return f"{rng.uniform(low, high):.{digits}f}"


def _boolean(args: list[str], rng: random.Random) -> str:
    return "true" if rng.random() < 0.5 else "false"


def _string(args: list[str], rng: random.Random) -> str:
    length = _int_arg(args, 0, 8, "string")
    return "".join(rng.choices(string.ascii_letters + string.digits, k=length))


def _word(args: list[str], rng: random.Random) -> str:
    length = _int_arg(args, 0, rng.randint(3, 10), "word")
    return "".join(rng.choices(string.ascii_lowercase, k=length))


def _uuid(args: list[str], rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _date(args: list[str], rng: random.Random) -> str:
    fmt = args[0] if args and args[0] else "%Y-%m-%d"
    day = datetime.now() - timedelta(days=rng.randint(0, 3650))
    return day.strftime(fmt)


def _datetime(args: list[str], rng: random.Random) -> str:
    fmt = args[0] if args and args[0] else "%Y-%m-%d %H:%M:%S"
    moment = datetime.now() - timedelta(seconds=rng.randint(0, 3650 * 86400))
    return moment.strftime(fmt)


def _now(args: list[str], rng: random.Random) -> str:
    fmt = args[0] if args and args[0] else "%Y-%m-%d %H:%M:%S"
    return datetime.now().strftime(fmt)


def _timestamp(args: list[str], rng: random.Random) -> str:
    return str(int(time.time() * 1000))


def _email(args: list[str], rng: random.Random) -> str:
    return f"{_word([], rng)}@{_word([], rng)}.com"


def _pick(args: list[str], rng: random.Random) -> str:
    if not args:
        raise ValueError("@pick needs at least one choice")
    return rng.choice(args)


GENERATORS: dict[str, Generator] = {
    "integer": _integer,
    "float": _float,
    "boolean": _boolean,
    "string": _string,
    "word": _word,
    "uuid": _uuid,
    "date": _date,
    "datetime": _datetime,
    "now": _now,
    "timestamp": _timestamp,
    "email": _email,
    "pick": _pick,
}


def synthesize(spec: str, rng: random.Random | None = None) -> str:
    """Replace every known ``@placeholder`` in ``spec`` with a generated value."""
    if rng is None:
        rng = random.Random()

    def _replace(m: re.Match) -> str:
        generator = GENERATORS.get(m.group(1).lower())
        if generator is None:
            return m.group(0)
        raw = m.group(2)
        args = [a.strip() for a in raw.split(",")] if raw and raw.strip() else []
        return generator(args, rng)

    return _PLACEHOLDER_RE.sub(_replace, spec)


class MockFunction:
    """Synthesizes a value and publishes it into the shared variable store."""

    def __init__(
        self,
        variables: VariableStore,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ):
        self.variables = variables
        self.rng = rng
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def execute(self, spec: str, name: str | None = None) -> str:
        """Return the synthesized value, stored under ``name`` (default: the spec)."""
        trimmed = spec.strip()
        if not trimmed:
            return ""
        value = synthesize(trimmed, rng=self.rng)
        key = name if name is not None else trimmed
        self.variables.put(key, value)
        self.logger.debug(f"Mock {trimmed!r} -> {key}={value!r}")
        return value
