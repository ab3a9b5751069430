"""Maps upload and delete parameters onto the on-disk album layout.

    <root>/<file_type>/<album_id>/tracks/<track_number>.<ext>
    <root>/<file_type>/<album_id>/cover.<ext>
    <root>/<file_type>/<album_id>/manifest.json

Locations are assembled from individually validated segments, so nothing in
this module touches the filesystem.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from app.core.errors import (
    InvalidAlbumId,
    InvalidTrackNumber,
    MissingExtension,
    MissingTrackNumber,
)

_SEPARATORS = ("/", "\\")
_EXTENSION_RE = re.compile(r"^[a-z0-9]+$")

TRACKS_DIR = "tracks"
MANIFEST_FILENAME = "manifest.json"


class FileType(str, Enum):
    PROMO = "promo"
    ALBUMS = "albums"


class Category(str, Enum):
    TRACKS = "tracks"
    COVER = "cover"
    MANIFEST = "manifest"


@dataclass(frozen=True)
class FileLocation:
    """A validated location relative to the storage root."""

    file_type: FileType
    album_id: str
    filename: str
    subdir: str | None = None

    @property
    def parts(self) -> tuple[str, ...]:
        parts = [self.file_type.value, self.album_id]
        if self.subdir:
            parts.append(self.subdir)
        parts.append(self.filename)
        return tuple(parts)

    @property
    def relative_path(self) -> PurePosixPath:
        return PurePosixPath(*self.parts)


def is_safe_segment(value: str | None) -> bool:
    if not value:
        return False
    if "\x00" in value or ".." in value or value == ".":
        return False
    return not any(sep in value for sep in _SEPARATORS)


def validate_album_id(album_id: str | None) -> str:
    if not is_safe_segment(album_id):
        raise InvalidAlbumId(f"Invalid album_id: {album_id!r}")
    return album_id


def validate_track_number(track_number: str | None) -> str:
    if track_number is None or track_number == "":
        raise MissingTrackNumber("track_number is required for tracks")
    if not is_safe_segment(track_number):
        raise InvalidTrackNumber(f"Invalid track_number: {track_number!r}")
    return track_number


def extract_extension(original_filename: str | None) -> str:
    """Return the lower-cased suffix of the uploaded file's name, without the dot."""
    if not original_filename:
        raise MissingExtension("Uploaded file has no filename to take an extension from")
    # Browsers on Windows may send the full client-side path.
    basename = PurePosixPath(original_filename.replace("\\", "/")).name
    suffix = PurePosixPath(basename).suffix.lstrip(".").lower()
    if not _EXTENSION_RE.match(suffix):
        raise MissingExtension(f"File extension is missing or invalid: {original_filename!r}")
    return suffix


def resolve_upload_location(
    file_type: FileType,
    album_id: str,
    category: Category,
    track_number: str | None = None,
    original_filename: str | None = None,
) -> FileLocation:
    file_type = FileType(file_type)
    category = Category(category)
    album_id = validate_album_id(album_id)

    if category is Category.TRACKS:
        track_number = validate_track_number(track_number)
        extension = extract_extension(original_filename)
        return FileLocation(
            file_type=file_type,
            album_id=album_id,
            subdir=TRACKS_DIR,
            filename=f"{track_number}.{extension}",
        )
    if category is Category.MANIFEST:
        return FileLocation(file_type=file_type, album_id=album_id, filename=MANIFEST_FILENAME)

    extension = extract_extension(original_filename)
    return FileLocation(file_type=file_type, album_id=album_id, filename=f"cover.{extension}")


def album_parts(file_type: FileType, album_id: str) -> tuple[str, str]:
    return FileType(file_type).value, validate_album_id(album_id)


def ensure_within_root(root: Path, candidate: Path) -> Path:
    """Check ``candidate`` still sits strictly below ``root`` once resolved.

    The unresolved ``candidate`` is returned so reported paths keep the
    configured root spelling.
    """
    resolved_root = root.resolve()
    resolved = candidate.resolve()
    if resolved == resolved_root or not resolved.is_relative_to(resolved_root):
        raise InvalidAlbumId(f"Resolved path escapes the storage root: {candidate}")
    return candidate
