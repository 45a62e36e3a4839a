"""JSON file roadmap repository."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from contracts import Roadmap
from .base import RoadmapPersistenceError, RoadmapRepository

logger = logging.getLogger(__name__)


class JsonFileRoadmapRepository(RoadmapRepository):
    """Stores one roadmap as pretty-printed JSON."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return "json"

    def load(self) -> Optional[Roadmap]:
        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RoadmapPersistenceError(f"Could not read roadmap file {self.path}: {e}") from e
        if not text.strip():
            return None
        try:
            roadmap = Roadmap.model_validate_json(text)
        except ValidationError as e:
            raise RoadmapPersistenceError(f"Invalid roadmap file {self.path}: {e}") from e
        logger.debug("Loaded roadmap %s from %s", roadmap.roadmap_id, self.path)
        return roadmap

    def save(self, roadmap: Roadmap) -> None:
        """Write to a temp file in the same directory, then replace the target."""
        payload = roadmap.model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise RoadmapPersistenceError(f"Could not write roadmap file {self.path}: {e}") from e
        logger.debug("Saved roadmap %s to %s", roadmap.roadmap_id, self.path)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise RoadmapPersistenceError(f"Could not delete roadmap file {self.path}: {e}") from e
