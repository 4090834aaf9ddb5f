"""Runtime settings for the command-line front end.

Settings come from the environment and can be overridden per
invocation:

    ST_STORE: Directory of the content-addressed store (default ``.semithreads``)
    ST_ACTOR: Actor identity to write as
    ST_DEVICE: Device identifier, 0..65535 (default 0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from semithreads.schema import DEVICE_MASK

DEFAULT_STORE = ".semithreads"


@dataclass(frozen=True)
class Settings:
    """Where to store data and who is writing.

    Attributes:
        store_path: Root of the DirectorySubstrate.
        actor_id: Actor to author as; None for read-only use.
        device_id: This device's identifier.
    """

    store_path: Path = Path(DEFAULT_STORE)
    actor_id: str | None = None
    device_id: int = 0

    def __post_init__(self):
        if not 0 <= self.device_id <= DEVICE_MASK:
            raise ValueError(f"device_id must be in [0, {DEVICE_MASK}], got {self.device_id}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Raises:
            ValueError: If ST_DEVICE is not an integer in range.
        """
        env = os.environ if environ is None else environ
        device = env.get("ST_DEVICE", "0")
        try:
            device_id = int(device)
        except ValueError as exc:
            raise ValueError(f"ST_DEVICE must be an integer, got {device!r}") from exc
        return cls(
            store_path=Path(env.get("ST_STORE") or DEFAULT_STORE),
            actor_id=env.get("ST_ACTOR") or None,
            device_id=device_id,
        )

    def override(self, **changes) -> Settings:
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
