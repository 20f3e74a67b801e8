from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ServiceConfig:
    history_limit: int = 50
    max_characters: int = 10_000
    max_message_bytes: int = 65_536
    catalog_path: Optional[str] = None
