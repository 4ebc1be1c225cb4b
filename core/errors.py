# core/errors.py

from pathlib import Path


class PhotoDedupError(Exception):
    """Base class for every error raised by the duplicate engine"""


class UnreadableImageError(PhotoDedupError):
    """File cannot be opened or decoded as an image"""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read image {self.path}: {reason}")


class SignatureFailedError(PhotoDedupError):
    """Normalization or hashing of an image failed"""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to generate signature for {self.path}: {reason}")


class TraversalFailedError(PhotoDedupError):
    """Directory walk itself errored. Always fatal."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Error walking directory tree at {self.path}: {reason}")


class MoveFailedError(PhotoDedupError):
    """Relocation of a single file failed"""

    def __init__(self, source, reason: str):
        self.source = str(source)
        self.reason = reason
        super().__init__(f"Error moving file {self.source}: {reason}")


class NameSpaceExhaustedError(MoveFailedError):
    """No free destination name left within the probe limit"""

    def __init__(self, output_dir, filename: str, attempts: int):
        self.output_dir = Path(output_dir)
        self.filename = filename
        self.attempts = attempts
        super().__init__(
            self.output_dir / filename,
            f"no free name after {attempts} attempts in {self.output_dir}"
        )
