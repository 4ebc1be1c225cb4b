# components/relocation.py

import logging
import os
from itertools import chain
from pathlib import Path
from typing import Iterator, Set, Union

from core.errors import MoveFailedError, NameSpaceExhaustedError
from core.models import MoveRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MAX_NAME_ATTEMPTS = 999


def _candidate_names(filename: str, max_attempts: int) -> Iterator[str]:
    """photo.jpg, photo_1.jpg, photo_2.jpg, ... photo_<max_attempts>.jpg"""
    stem, suffix = os.path.splitext(filename)
    numbered = (f"{stem}_{i}{suffix}" for i in range(1, max_attempts + 1))
    return chain([filename], numbered)


def _ensure_directory(directory: Path, source: PathLike):
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MoveFailedError(source, f"cannot create output directory {directory}: {e}") from e


def resolve_destination(output_dir: PathLike,
                        filename: str,
                        max_attempts: int = MAX_NAME_ATTEMPTS) -> Path:
    """
    Reserve a free destination path for `filename` inside `output_dir`.

    The bare name is tried first, then `stem_1.ext` up to
    `stem_<max_attempts>.ext`. A name is claimed by creating an empty
    placeholder with exclusive create, so the returned path did not exist
    before the call and no later call can return it again.

    Raises:
        NameSpaceExhaustedError: every candidate name is taken
        MoveFailedError: the directory or placeholder cannot be created
    """
    output_dir = Path(output_dir)
    _ensure_directory(output_dir, output_dir / filename)

    for name in _candidate_names(filename, max_attempts):
        candidate = output_dir / name
        try:
            with open(candidate, 'xb'):
                pass
        except FileExistsError:
            continue
        except OSError as e:
            raise MoveFailedError(candidate, f"cannot reserve destination: {e}") from e
        return candidate

    raise NameSpaceExhaustedError(output_dir, filename, max_attempts)


def move_file(source: PathLike, destination: PathLike):
    """
    Atomically rename `source` to `destination`.

    Only a rename is attempted, never copy-and-delete, so a failure
    (missing source, permissions, different filesystem) leaves the source
    exactly where it was.

    Raises:
        MoveFailedError: the rename did not happen
    """
    source = Path(source)
    destination = Path(destination)

    _ensure_directory(destination.parent, source)

    try:
        os.replace(source, destination)
    except OSError as e:
        raise MoveFailedError(source, e.strerror or str(e)) from e


class RelocationPolicy:
    """
    Moves non-keeper duplicates into the output directory with
    collision-safe names
    """

    def __init__(self, output_dir: PathLike, max_attempts: int = MAX_NAME_ATTEMPTS):
        self.output_dir = Path(output_dir)
        self.max_attempts = max_attempts
        self._planned: Set[Path] = set()

    def relocate(self, source: PathLike) -> MoveRecord:
        """Move one file out of the way and return where it went"""
        source = Path(source)
        destination = resolve_destination(self.output_dir, source.name, self.max_attempts)

        try:
            move_file(source, destination)
        except MoveFailedError:
            self._discard_placeholder(destination)
            raise

        record = MoveRecord(source=str(source), destination=str(destination))

        logger.info("Moved: %s -> %s", source, destination)
        return record

    def plan(self, source: PathLike) -> MoveRecord:
        """
        Work out where `source` would go without touching the filesystem.
        Names handed out by earlier plans are treated as taken.
        """
        source = Path(source)

        for name in _candidate_names(source.name, self.max_attempts):
            candidate = self.output_dir / name
            if candidate in self._planned or candidate.exists():
                continue
            self._planned.add(candidate)
            return MoveRecord(source=str(source), destination=str(candidate))

        raise NameSpaceExhaustedError(self.output_dir, source.name, self.max_attempts)

    @staticmethod
    def _discard_placeholder(destination: Path):
        """Drop the empty file reserved for a move that did not happen"""
        try:
            if destination.stat().st_size == 0:
                destination.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove placeholder %s: %s", destination, e)
