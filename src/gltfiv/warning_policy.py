"""Coded diagnostics for recoverable conversion issues."""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from gltfiv.errors import ConversionError

UNSUPPORTED_MODE = "W01"
DEFAULT_MATERIAL = "W02"
TEXTURE_IGNORED = "W03"

CODE_DESCRIPTIONS: dict[str, str] = {
    UNSUPPORTED_MODE: "primitive with a non-triangle mode skipped",
    DEFAULT_MATERIAL: "primitive without material converted with the default material",
    TEXTURE_IGNORED: "material texture ignored",
}

KNOWN_CODES: frozenset[str] = frozenset(CODE_DESCRIPTIONS)


class GltfIvWarning(UserWarning):
    """A recoverable conversion issue; ``code`` is one of KNOWN_CODES."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(f"[{code}] {message}")

    @property
    def description(self) -> str:
        return CODE_DESCRIPTIONS.get(self.code, "")


@dataclass(frozen=True)
class WarningPolicy:
    """Which W-codes abort the conversion and which are silenced.

    A code listed in both sets is silenced.
    """

    warn_as_error: frozenset[str] = frozenset()
    suppress: frozenset[str] = frozenset()

    def action(self, code: str) -> Literal["suppress", "error", "warn"]:
        if code in self.suppress:
            return "suppress"
        if code in self.warn_as_error:
            return "error"
        return "warn"


def emit_warning(code: str, message: str, *, policy: WarningPolicy | None = None) -> None:
    """Report a recoverable conversion issue under ``code``.

    Without a policy every code becomes a ``GltfIvWarning``. A code the
    policy escalates raises ``ConversionError``, which fails the run at the
    ``convert`` boundary.
    """
    action = policy.action(code) if policy is not None else "warn"
    if action == "suppress":
        return
    if action == "error":
        raise ConversionError(f"[{code}] {message}")
    warnings.warn(GltfIvWarning(code, message), stacklevel=2)


def parse_code_list(raw: str | Iterable[str]) -> frozenset[str]:
    """Parse W-codes from a comma-separated string or an iterable of codes.

    Raises ``ValueError`` for unknown codes.
    """
    tokens = raw.split(",") if isinstance(raw, str) else raw
    codes: set[str] = set()
    for token in tokens:
        token = str(token).strip()
        if not token:
            continue
        if token not in KNOWN_CODES:
            raise ValueError(f"Unknown warning code: {token!r} (known: {sorted(KNOWN_CODES)})")
        codes.add(token)
    return frozenset(codes)
