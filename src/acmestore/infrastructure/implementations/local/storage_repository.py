"""
Local file-based storage repository implementation.

Stores resources in a local directory structure:
    {base_dir}/
        account/
            key_pair.pem                     (0600)
        domains/
            {domain}/
                key_pair.pem                 (0600)
                distinguished_name.json
                fullchain.pem

Every write is staged in a temporary file next to its destination and
published with a single os.replace, so readers and crashes only ever see
complete content.
"""

import os
import stat
import tempfile
from contextlib import suppress
from pathlib import Path

from loguru import logger

from acmestore.domain.errors import CorruptError, NotFoundError, StorageFailureError
from acmestore.infrastructure.repositories.storage_repository import (
    StorageRepository,
    split_key,
)

PRIVATE_FILE_MODE = 0o600
STAGING_SUFFIX = ".tmp"


class LocalStorageRepository(StorageRepository):
    """
    File-based atomic storage.

    Safe against concurrent readers and interrupted writers; the last
    committed write wins between racing writers.
    """

    def __init__(
        self,
        base_dir: str | Path = "./.acmestore",
        public_file_mode: int = 0o644,
        directory_mode: int = 0o700,
        durable: bool = True,
    ):
        """
        Initialize local storage repository.

        Args:
            base_dir: Root directory of the store
            public_file_mode: Mode of non-private resources
            directory_mode: Mode of directories created by the store
            durable: fsync staged files and their directory on commit
        """
        self.base_dir = Path(base_dir).expanduser()
        self.public_file_mode = public_file_mode
        self.directory_mode = directory_mode
        self.durable = durable

        # Create directory if it doesn't exist
        self.base_dir.mkdir(parents=True, exist_ok=True, mode=directory_mode)

        # Set restrictive permissions on the root
        try:
            self.base_dir.chmod(directory_mode)
        except OSError as e:
            logger.warning(f"Could not set directory permissions: {e}")

        logger.info(f"Initialized LocalStorageRepository at {self.base_dir}")

    def _file_path(self, key: str) -> Path:
        """Get path to the file of a resource."""
        return self.base_dir.joinpath(*split_key(key))

    def _make_directories(self, directory: Path) -> None:
        """Create missing directories below the root with the store's mode."""
        missing = []
        current = directory
        while current != self.base_dir and not current.is_dir():
            missing.append(current)
            current = current.parent

        for path in reversed(missing):
            with suppress(FileExistsError):
                path.mkdir(mode=self.directory_mode)

    def _sync_directory(self, directory: Path) -> None:
        """Flush a directory entry so a committed rename survives power loss."""
        if os.name == "nt":
            return
        fd = os.open(directory, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)

    def _commit(self, file_path: Path, content: bytes, mode: int) -> None:
        """
        Stage content next to its destination, then publish it.

        Once os.replace succeeds the new content is what readers see, so a
        failing directory fsync afterwards only weakens durability across a
        power loss. It is logged as a warning and the write still succeeds.
        """
        # mkstemp creates the staged file readable by the owner only
        fd, staged_name = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.name}.",
            suffix=STAGING_SUFFIX,
        )
        staged_path = Path(staged_name)

        try:
            with os.fdopen(fd, "wb") as staged_file:
                staged_file.write(content)
                staged_file.flush()
                if self.durable:
                    os.fsync(staged_file.fileno())
            os.chmod(staged_path, mode)
            os.replace(staged_path, file_path)
        except BaseException:
            with suppress(FileNotFoundError):
                staged_path.unlink()
            raise

        if self.durable:
            try:
                self._sync_directory(file_path.parent)
            except OSError as e:
                logger.warning(
                    f"Published {file_path.name} but could not sync its directory: {e}"
                )

    async def write(self, key: str, content: bytes, *, private: bool = False) -> None:
        """Write a resource atomically."""
        file_path = self._file_path(key)
        mode = PRIVATE_FILE_MODE if private else self.public_file_mode

        try:
            self._make_directories(file_path.parent)
            self._commit(file_path, content, mode)
        except OSError as e:
            logger.error(f"Failed to write {key}: {e}")
            raise StorageFailureError(f"Failed to write {key}: {e}", key=key) from e

        logger.info(f"Stored {key} ({len(content)} bytes, mode {oct(mode)})")

    async def read(self, key: str) -> bytes:
        """Read a resource."""
        file_path = self._file_path(key)

        try:
            content = file_path.read_bytes()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"{key} not found", key=key) from e
        except OSError as e:
            logger.error(f"Failed to read {key}: {e}")
            raise StorageFailureError(f"Failed to read {key}: {e}", key=key) from e

        if not content:
            logger.warning(f"Stored resource {key} is empty")
            raise CorruptError(f"{key} is empty", key=key)

        return content

    async def exists(self, key: str) -> bool:
        """Check if a resource exists."""
        file_path = self._file_path(key)

        try:
            return stat.S_ISREG(file_path.stat().st_mode)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            logger.error(f"Failed to check {key}: {e}")
            raise StorageFailureError(f"Failed to check {key}: {e}", key=key) from e
