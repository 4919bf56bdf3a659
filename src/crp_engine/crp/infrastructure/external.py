"""
CRP External Integrations
=========================

Default adapters for the CRP collaborators:
- YAML roster file loader with watchdog hot reload
- Ticket-scoped thread id generator
- Static thread template provider
"""

import threading
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from crp_engine.config import SkillType
from crp_engine.core import ConfigurationException
from crp_engine.crp.application.dto import EngineerDTO
from crp_engine.crp.application.services import IThreadIdGenerator, IThreadTemplateProvider
from crp_engine.crp.domain import Engineer, ThreadTemplate
from crp_engine.crp.domain.templates import RELEVANT_CONTENT_KEYWORDS, THREAD_TEMPLATES
from crp_engine.crp.infrastructure.repositories import InMemoryEngineerRepository
from crp_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


def load_roster_file(path: Path) -> List[Engineer]:
    """
    Load and validate a YAML roster file.

    The file holds a top-level ``engineers`` list; each entry follows the
    engineer DTO fields.

    Raises:
        ConfigurationException: the file is not UTF-8 YAML or an entry is invalid
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except UnicodeDecodeError as e:
            raise ConfigurationException(f"Roster file is not valid UTF-8: {path}", {"error": str(e)})
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Roster file is not valid YAML: {path}", {"error": str(e)})

    entries = data.get("engineers", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationException(f"Roster file must contain an 'engineers' list: {path}")

    try:
        return [EngineerDTO.model_validate(entry).to_domain() for entry in entries]
    except ValidationError as e:
        raise ConfigurationException(f"Invalid engineer entry in {path}", {"errors": e.errors()})


class RosterFileHandler(FileSystemEventHandler):
    """Watchdog event handler for roster file changes."""

    def __init__(self, roster_manager: "RosterManager", roster_path: Path):
        self.roster_manager = roster_manager
        self.roster_path = roster_path
        super().__init__()

    def on_modified(self, event):
        """Handle file modification event."""
        if event.is_directory:
            return
        if Path(event.src_path).resolve() == self.roster_path.resolve():
            logger.info(f"Roster file changed: {event.src_path}")
            self.roster_manager.reload()


class RosterManager:
    """
    Keeps an in-memory roster in sync with a YAML file.

    Uses watchdog to monitor the file and reload the roster without
    restarting the service. A broken edit leaves the previous roster in
    place.
    """

    def __init__(self, repository: InMemoryEngineerRepository):
        self._repository = repository
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    @property
    def repository(self) -> InMemoryEngineerRepository:
        return self._repository

    def load(self, path: Path) -> int:
        """
        Initial roster load.

        A missing file gives an empty roster; an invalid one raises.

        Returns:
            Number of engineers loaded
        """
        self._path = path
        if not path.exists():
            logger.warning(f"Roster file not found: {path}, starting with an empty roster")
            return self._repository.replace_all([])
        with self._lock:
            return self._repository.replace_all(load_roster_file(path))

    def reload(self) -> bool:
        """Reload the roster from file."""
        if self._path is None:
            return False

        try:
            with self._lock:
                count = self._repository.replace_all(load_roster_file(self._path))
            logger.info("Engineer roster reloaded successfully", extra={"engineer_count": count})
            return True
        except Exception as e:
            logger.error(f"Failed to reload roster: {e}")
            return False

    def start_watching(self) -> None:
        """
        Start watching the roster file for changes.

        Skips watching if the file doesn't exist or the platform has no
        file watching support (e.g. some containers).
        """
        if self._path is None:
            raise RuntimeError("Roster not loaded. Call load() first.")

        if not self._path.exists():
            logger.info(f"Roster file doesn't exist, skipping file watch: {self._path}")
            return

        try:
            self._observer = Observer()
            handler = RosterFileHandler(self, self._path)
            self._observer.schedule(
                handler,
                str(self._path.parent),
                recursive=False
            )
            self._observer.start()
            logger.info(f"Started watching roster file: {self._path}")
        except OSError as e:
            logger.warning(f"File watching not available, using static roster: {e}")
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching the roster file (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None


class SequentialThreadIdGenerator(IThreadIdGenerator):
    """
    Thread ids of the form ``THR-{ticket number}-{sequence}``.

    The ticket number is the third dash-separated part of the ticket id
    (``TKT-2024-001`` -> ``001``); ids with fewer parts are used whole.
    """

    def generate(self, ticket_id: str, sequence: int) -> str:
        parts = ticket_id.split("-")
        ticket_number = parts[2] if len(parts) > 2 else ticket_id
        return f"THR-{ticket_number}-{sequence}"


class StaticTemplateProvider(IThreadTemplateProvider):
    """Serves the built-in thread templates and relevant-content keywords."""

    def get_template(self, skill: SkillType) -> ThreadTemplate:
        return THREAD_TEMPLATES[skill]

    def get_keywords(self, skill: SkillType) -> List[str]:
        return list(RELEVANT_CONTENT_KEYWORDS.get(skill, []))
