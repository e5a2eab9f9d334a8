"""
Random identifiers for Paste Platform.

Provides:
- IdentifierGenerator.generate_id: short public id (default 5 chars)
- IdentifierGenerator.generate_edit_code: default secret (default 8 chars)

Both draw from the base-36 alphabet (0-9a-z). Neither is unique on its own;
the entry manager checks candidate ids against storage.

Configuration (via paste_platform.config.settings):
- ID_LENGTH: generated id length (default 5; clamped 4..32)
- EDIT_CODE_LENGTH: generated edit code length (default 8; clamped 4..32)

Notes:
- The random source is injectable. Production uses `random.SystemRandom`;
  tests pass `random.Random(seed)` for reproducible ids.
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from paste_platform.config import settings

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _safe_len(length: Optional[int], default: int) -> int:
    L = int(length) if length is not None else int(default)
    return max(4, min(32, L))


@dataclass
class IdentifierGenerator:
    """Base-36 token source for entry ids and edit codes."""
    rng: random.Random = field(default_factory=random.SystemRandom)
    id_length: Optional[int] = None
    edit_code_length: Optional[int] = None

    def __post_init__(self):
        self.id_length = _safe_len(self.id_length, settings.ID_LENGTH)
        self.edit_code_length = _safe_len(self.edit_code_length, settings.EDIT_CODE_LENGTH)

    def _token(self, length: int) -> str:
        return "".join(self.rng.choice(BASE36_ALPHABET) for _ in range(length))

    def generate_id(self) -> str:
        return self._token(self.id_length)

    def generate_edit_code(self) -> str:
        return self._token(self.edit_code_length)
