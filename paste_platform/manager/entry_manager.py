"""
EntryManager module for Paste Platform.

Responsibilities:
    - Create entries with a custom or generated id and a custom or generated edit code
    - Serve content and the public (secret-free) projection of an entry
    - Authorize and apply updates, including renaming an entry to a new id
    - Keep ids canonical: every user-supplied id is sanitized once, here

Design notes:
    - Storage is an injected dependency (any BaseStorage); the manager never
      catches storage exceptions because backends report failures as
      None/False.
    - Failures are raised as EntryError subclasses carrying a reason tag.
    - Uniqueness is a check-then-act against storage: load the candidate id,
      then save. Two concurrent creates of the same custom id can both pass
      the check; the later save wins. Renames are delete-then-save and are
      not atomic across the two calls either. Both races are accepted.
    - Random source and clock are injectable for deterministic tests.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..models import Clock, Entry, now_iso
from ..storage.base import BaseStorage
from ..storage.sanitize import is_canonical_id, sanitize_id
from .errors import EmptyContent, NotFound, SaveFailed, Unauthorized, UrlTaken
from .identifiers import IdentifierGenerator

logger = logging.getLogger(__name__)

UPDATE_URL_TAKEN = "New URL already exists. Please choose a different one."
UPDATE_FAILED = "Failed to update entry"


def _provided(value: Optional[str]) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class CreateResult:
    """Outcome of a successful create."""
    id: str
    edit_code: str
    reveal_edit_code: bool


class EntryManager:
    """
    Coordinates the entry lifecycle on top of a storage backend.
    """

    def __init__(
        self,
        storage: BaseStorage,
        identifiers: Optional[IdentifierGenerator] = None,
        clock: Optional[Clock] = None,
        max_id_attempts: int = 5,
        reserved: Optional[Callable[[str], bool]] = None,
    ):
        """
        Args:
            storage (BaseStorage): Initialized backend.
            identifiers (Optional[IdentifierGenerator]): Id/edit code source.
            clock (Optional[Clock]): Returns the current aware datetime.
            max_id_attempts (int): Generated ids tried before giving up.
            reserved (Optional[Callable[[str], bool]]): Flags ids that are
                unusable even when storage has no entry for them (for
                example paths already served by the HTTP layer).
        """
        self.storage = storage
        self.identifiers = identifiers or IdentifierGenerator()
        self.clock = clock
        self.max_id_attempts = max(1, max_id_attempts)
        self.reserved = reserved or (lambda entry_id: False)

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    def _load(self, entry_id: str) -> Entry:
        entry = self.storage.load_entry(entry_id) if is_canonical_id(entry_id) else None
        if entry is None:
            raise NotFound()
        return entry

    def _is_taken(self, entry_id: str) -> bool:
        return self.reserved(entry_id) or self.storage.load_entry(entry_id) is not None

    def _generated_id(self) -> str:
        """Draw ids until one is free; the last candidate is returned even if taken."""
        candidate = self.identifiers.generate_id()
        for _ in range(self.max_id_attempts - 1):
            if not self._is_taken(candidate):
                break
            logger.info("Generated id %r is taken; drawing another", candidate)
            candidate = self.identifiers.generate_id()
        return candidate

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create(
        self,
        content: Optional[str],
        custom_url: Optional[str] = None,
        edit_code: Optional[str] = None,
    ) -> CreateResult:
        """
        Create a new entry.

        Rules:
            - Content must be non-blank; it is stored trimmed.
            - A non-blank custom_url is sanitized and used as the id. If it
              sanitizes to nothing, an id is generated instead.
            - A non-blank edit_code is trimmed and used; otherwise one is
              generated and the result asks the caller to reveal it once.

        Returns:
            CreateResult: Final id, edit code, and whether to reveal the code.

        Raises:
            EmptyContent: Blank content.
            UrlTaken: The chosen id is already used.
            SaveFailed: Storage reported failure.
        """
        if not _provided(content):
            raise EmptyContent()

        entry_id = sanitize_id(custom_url) if _provided(custom_url) else ""
        if not entry_id:
            entry_id = self._generated_id()

        user_code = _provided(edit_code)
        final_code = edit_code.strip() if user_code else self.identifiers.generate_edit_code()

        if self._is_taken(entry_id):
            raise UrlTaken()

        now = now_iso(self.clock)
        entry = Entry(
            id=entry_id,
            content=content.strip(),
            edit_code=final_code,
            created_at=now,
            updated_at=now,
        )
        if not self.storage.save_entry(entry):
            raise SaveFailed()

        logger.info("Created entry %r", entry_id)
        return CreateResult(id=entry_id, edit_code=final_code, reveal_edit_code=not user_code)

    def view(self, entry_id: str) -> str:
        """Return the stored content verbatim, or raise NotFound."""
        return self._load(entry_id).content

    def fetch_for_edit(self, entry_id: str) -> Dict[str, Any]:
        """Return every field except the edit code, or raise NotFound."""
        return self._load(entry_id).public_record()

    def update(
        self,
        entry_id: str,
        edit_code: Optional[str],
        new_content: Optional[str],
        new_edit_code: Optional[str] = None,
        new_url: Optional[str] = None,
    ) -> str:
        """
        Update an entry, optionally renaming it.

        Rules (checked in this order):
            - The entry must exist (NotFound).
            - edit_code must equal the stored secret exactly (Unauthorized).
            - new_content must be non-blank (EmptyContent).
            - A non-blank new_url whose sanitized form differs from entry_id
              must be free (UrlTaken); the old entry is then deleted and the
              entry is saved under the new id.
            - A blank new_edit_code keeps the existing secret.

        Returns:
            str: Final id (the new one after a rename).

        Raises:
            NotFound, Unauthorized, EmptyContent, UrlTaken, SaveFailed
        """
        entry = self._load(entry_id)

        if not edit_code or edit_code != entry.edit_code:
            raise Unauthorized()

        if not _provided(new_content):
            raise EmptyContent()

        final_id = entry_id
        target = sanitize_id(new_url) if _provided(new_url) else ""
        if target and target != entry_id:
            if self._is_taken(target):
                raise UrlTaken(UPDATE_URL_TAKEN)
            if not self.storage.delete_entry(entry_id):
                raise SaveFailed(UPDATE_FAILED)
            final_id = target

        updated = entry.copy(
            id=final_id,
            content=new_content.strip(),
            edit_code=new_edit_code.strip() if _provided(new_edit_code) else entry.edit_code,
            updated_at=now_iso(self.clock),
        )
        if not self.storage.save_entry(updated):
            raise SaveFailed(UPDATE_FAILED)

        if final_id != entry_id:
            logger.info("Renamed entry %r to %r", entry_id, final_id)
        return final_id
