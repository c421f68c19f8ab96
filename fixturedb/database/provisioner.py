"""Stage snapshot provisioning.

Each exercise stage works on its own database file. A stage starts as a copy
of the previous stage's committed file, so later mutations never reach the
source snapshot.
"""

import os
import re
import shutil
import tempfile
from pathlib import Path

from fixturedb.config import Settings
from fixturedb.exceptions import ProvisioningError
from fixturedb.log import get_logger

from .facade import Database
from .registry import SchemaRegistry

logger = get_logger(__name__)

STAGE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class FixtureProvisioner:
    """Creates and copies stage databases under ``settings.stage_dir``."""

    def __init__(
        self, settings: Settings, registry: SchemaRegistry | None = None
    ) -> None:
        self.settings = settings
        self.registry = registry

    def stage_path(self, stage: str) -> Path:
        """Get the database file of a stage.

        Raises:
            ProvisioningError: If the stage id is not a plain name
        """
        if not STAGE_ID_PATTERN.match(stage):
            raise ProvisioningError(f"Invalid stage id: {stage!r}")
        return self.settings.stage_path(stage)

    def stage_exists(self, stage: str) -> bool:
        return self.stage_path(stage).is_file()

    def open(self, stage: str) -> Database:
        """Open an existing stage without copying it."""
        path = self.stage_path(stage)
        if not path.is_file():
            raise ProvisioningError(f"Stage '{stage}' does not exist: {path}")
        return self._database(path)

    def create_stage(self, stage: str, overwrite: bool = False) -> Database:
        """Create an empty stage database, typically the ``00`` seed.

        Args:
            stage: Stage id
            overwrite: Replace an existing file instead of failing

        Returns:
            Database facade for the new stage
        """
        path = self.stage_path(stage)
        if path.exists():
            if not overwrite:
                raise ProvisioningError(f"Stage '{stage}' already exists: {path}")
            path.unlink()

        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        logger.info(f"Created empty stage '{stage}' at {path}")
        return self._database(path)

    def from_existing(self, source: str, target: str) -> Database:
        """Copy stage ``source`` to ``target`` and open the copy.

        The copy is written to a temporary file beside the target and renamed
        into place, so a reader never sees a partial file.

        Args:
            source: Stage id to copy from
            target: Stage id to create or replace

        Returns:
            Database facade for the target stage

        Raises:
            ProvisioningError: If the source snapshot is missing, the ids are
                invalid or equal, or the copy fails
        """
        source_path = self.stage_path(source)
        target_path = self.stage_path(target)

        if source == target:
            raise ProvisioningError(f"Cannot provision stage '{source}' from itself")
        if not source_path.is_file():
            raise ProvisioningError(
                f"Source stage '{source}' does not exist: {source_path}"
            )

        target_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{target}-", suffix=".tmp", dir=target_path.parent
        )
        os.close(fd)
        try:
            shutil.copyfile(source_path, temp_name)
            # A leftover journal would be replayed onto the fresh copy
            Path(f"{target_path}-journal").unlink(missing_ok=True)
            os.replace(temp_name, target_path)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            logger.error(f"Failed to copy stage '{source}' to '{target}': {e}")
            raise ProvisioningError(
                f"Failed to copy stage '{source}' to '{target}': {e}"
            ) from e

        logger.info(f"Provisioned stage '{target}' from '{source}'")
        return self._database(target_path)

    def _database(self, path: Path) -> Database:
        return Database(
            path, registry=self.registry, busy_timeout=self.settings.busy_timeout
        )
