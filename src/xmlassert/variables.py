"""Shared variable namespace for values produced while a suite runs."""

from __future__ import annotations

import re
import threading

_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z_0-9.\-]*)(?::-(.*?))?\}")


class UnboundVariable(KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class VariableStore:
    """Thread-safe name -> value mapping visible to every later step."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def put(self, name: str, value: str) -> None:
        with self._lock:
            self._values[name] = value

    def get(self, name: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._values.get(name, default)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._values)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def expand(self, text: str) -> str:
        """Expand ``${name}`` and ``${name:-default}`` references in ``text``.

        Raises UnboundVariable for a reference without default that is not set.
        Anything else, including a bare ``$`` or backslashes, is left alone.
        """
        values = self.snapshot()

        def _replace(m: re.Match) -> str:
            name, default = m.group(1), m.group(2)
            if name in values:
                return values[name]
            if default is not None:
                return default
            raise UnboundVariable(f"variable ${{{name}}} is not set")

        return _VAR_RE.sub(_replace, text)
