"""Registered public key identity."""
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from themestats.protocol.keys import is_valid_key_id


@dataclass(frozen=True)
class PublicKeyIdentity:
    key_id: str
    public_key: dict[str, Any]
    display_name: str
    registered_at: datetime

    def __post_init__(self) -> None:
        if not is_valid_key_id(self.key_id) or self.key_id != self.key_id.lower():
            raise ValueError("key_id must be 64 lowercase hex characters")
        if not self.public_key:
            raise ValueError("public_key cannot be empty")

    @property
    def public_key_json(self) -> str:
        return json.dumps(self.public_key, separators=(",", ":"))
