"""In-memory history of photos received per user."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from photo_relay.domain.photos import PhotoRecord


@dataclass
class PhotoHistory:
    """Process-wide photo history keyed by Telegram user id.

    Records are never evicted and live as long as the process does.
    """

    _records: dict[int, list[PhotoRecord]] = field(default_factory=dict)

    def record(self, owner_id: int, file_url: str) -> PhotoRecord:
        """Append a photo to the owner's history."""
        entry = PhotoRecord(
            owner_id=owner_id,
            file_url=file_url,
            timestamp=datetime.now(tz=UTC),
        )
        self._records.setdefault(owner_id, []).append(entry)
        return entry

    def for_user(self, owner_id: int) -> list[PhotoRecord]:
        """Return a copy of the owner's records, oldest first.

        Inspection helper: the webhook itself only reads ``user_count``.
        """
        return list(self._records.get(owner_id, []))

    @property
    def user_count(self) -> int:
        return len(self._records)
