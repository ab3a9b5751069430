import asyncio
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from app.core.config import get_settings
from app.core.errors import StorageIOError
from app.services.ownership import OwnershipAdjuster, build_ownership_adjuster
from app.services.paths import FileLocation, FileType, album_parts, ensure_within_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFilePath:
    path: Path
    url: str
    filename: str


@dataclass(frozen=True)
class DeletedTree:
    path: Path
    existed: bool

    @property
    def message(self) -> str:
        return f'Deleted "{self.path}"'


class LocalFileStore:
    """Album file tree on the local filesystem.

    Uploads overwrite whatever already sits at the resolved location; two
    concurrent writers to the same file end with the last one to finish.
    """

    def __init__(
        self,
        root: Path,
        public_base_url: str,
        ownership: OwnershipAdjuster | None = None,
    ) -> None:
        self.root = Path(root).absolute()
        self.public_base_url = public_base_url.rstrip("/")
        self.ownership = ownership or build_ownership_adjuster(None)

    def path_for(self, location: FileLocation) -> Path:
        return ensure_within_root(self.root, self.root.joinpath(*location.parts))

    def album_dir(self, file_type: FileType, album_id: str) -> Path:
        return ensure_within_root(self.root, self.root.joinpath(*album_parts(file_type, album_id)))

    def url_for(self, location: FileLocation) -> str:
        return f"{self.public_base_url}/{quote(location.relative_path.as_posix(), safe='/')}"

    async def put(self, location: FileLocation, data: bytes) -> StoredFilePath:
        target = self.path_for(location)
        await asyncio.to_thread(self._write, target, data)
        logger.info("File saved: %r (%d bytes)", str(target), len(data))

        await asyncio.to_thread(self.ownership.adjust, target)
        return StoredFilePath(path=target, url=self.url_for(location), filename=location.filename)

    async def delete_tree(self, file_type: FileType, album_id: str) -> DeletedTree:
        target = self.album_dir(file_type, album_id)
        existed = await asyncio.to_thread(self._remove_tree, target)
        if existed:
            logger.info("Deleted: %r", str(target))
        else:
            logger.info("Nothing to delete at %r", str(target))
        return DeletedTree(path=target, existed=existed)

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(f"Failed to create directory: {exc}") from exc

        # Write beside the target and swap it in, so readers never see a partial file.
        try:
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
        except OSError as exc:
            raise StorageIOError(f"Failed to create file: {exc}") from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, target)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageIOError(f"Failed to write file: {exc}") from exc

    @staticmethod
    def _remove_tree(target: Path) -> bool:
        try:
            shutil.rmtree(target)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageIOError(f"Failed to delete directory: {exc}") from exc
        return True


_storage_service: LocalFileStore | None = None


def get_storage_service() -> LocalFileStore:
    global _storage_service
    if _storage_service is None:
        settings = get_settings()
        _storage_service = LocalFileStore(
            root=settings.storage_root,
            public_base_url=settings.public_base_url,
            ownership=build_ownership_adjuster(settings.file_owner),
        )
    return _storage_service


def reset_storage_service() -> None:
    global _storage_service
    _storage_service = None
