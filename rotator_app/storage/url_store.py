import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from rotator_app.exceptions import StorageError
from rotator_app.models.url_set import ActiveURLSet
from rotator_app.storage.file_lock import exclusive_lock, lock_path_for


logger = logging.getLogger(__name__)


class ActiveURLStore:
    """
    File-backed store for the active URL set (data/urls.json).

    Writes go to a temporary file that replaces the real one under an
    exclusive lock, so readers always see a complete document.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock_path = lock_path_for(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[ActiveURLSet]:
        """Current set, or None when the file is missing or unreadable"""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read %s: %s", self.path, e)
            return None

        try:
            return ActiveURLSet.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring malformed URL set in %s: %s", self.path, e)
            return None

    def save(self, urls: List[str], updated_from: str, updated_at: Optional[datetime] = None) -> ActiveURLSet:
        """
        Replace the stored set.

        Raises:
            StorageError: if the file cannot be written
        """
        url_set = ActiveURLSet(
            urls=urls,
            updated_at=(updated_at or datetime.now().astimezone()).isoformat(timespec="seconds"),
            updated_from=updated_from,
        )
        document = json.dumps(url_set.model_dump(by_alias=True), indent=4, ensure_ascii=False)

        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with exclusive_lock(self.lock_path):
                temp_path.write_text(document, encoding="utf-8")
                os.replace(temp_path, self.path)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, e)
            raise StorageError() from e

        return url_set
