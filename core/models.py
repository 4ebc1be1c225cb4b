# core/models.py

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class MoveRecord:
    """A single relocation: where a duplicate came from and where it went"""
    source: str
    destination: str

    def to_dict(self) -> Dict[str, str]:
        return {'source': self.source, 'destination': self.destination}


class SignatureGroups:
    """
    Signature -> file paths map shared by the scanning workers.

    Inserts are serialized behind a lock. Once scanning is over the map is
    frozen and only read from.
    """

    def __init__(self):
        self._groups: Dict[str, List[str]] = defaultdict(list)
        self._seen = set()
        self._lock = threading.Lock()
        self._frozen = False

    def add(self, signature: str, path: str):
        """Record that `path` hashed to `signature`"""
        with self._lock:
            if self._frozen:
                raise RuntimeError("Signature groups are frozen, scanning is over")
            if path in self._seen:
                raise ValueError(f"Path already grouped: {path}")
            self._seen.add(path)
            self._groups[signature].append(path)

    def freeze(self):
        with self._lock:
            self._frozen = True

    def duplicate_groups(self) -> List[Tuple[str, List[str]]]:
        """
        Groups with at least two members, ordered by signature.
        Members are sorted so iteration order never depends on scan order.
        """
        with self._lock:
            return [
                (signature, sorted(paths))
                for signature, paths in sorted(self._groups.items())
                if len(paths) > 1
            ]

    def count_duplicates(self) -> int:
        with self._lock:
            return sum(1 for paths in self._groups.values() if len(paths) > 1)

    def __len__(self):
        with self._lock:
            return len(self._groups)

    def get(self, signature: str) -> List[str]:
        with self._lock:
            return list(self._groups.get(signature, []))


@dataclass
class RunStats:
    """Counters collected over one detection run"""
    total_files: int = 0
    images_found: int = 0
    duplicate_groups: int = 0
    files_moved: int = 0
    signature_failures: int = 0
    moves: List[MoveRecord] = field(default_factory=list)
    planned_moves: List[MoveRecord] = field(default_factory=list)
    failed_moves: List[Tuple[str, str]] = field(default_factory=list)

    def __post_init__(self):
        self._lock = threading.Lock()

    def increment(self, counter: str, amount: int = 1):
        """Thread-safe increment of one of the integer counters"""
        with self._lock:
            setattr(self, counter, getattr(self, counter) + amount)

    def record_move(self, record: MoveRecord):
        with self._lock:
            self.moves.append(record)
            self.files_moved += 1

    def record_planned(self, record: MoveRecord):
        with self._lock:
            self.planned_moves.append(record)

    def record_failure(self, path: str, reason: str):
        with self._lock:
            self.failed_moves.append((path, reason))

    def to_dict(self) -> Dict:
        with self._lock:
            return {
                'total_files': self.total_files,
                'images_found': self.images_found,
                'duplicate_groups': self.duplicate_groups,
                'files_moved': self.files_moved,
                'signature_failures': self.signature_failures,
                'moves': [m.to_dict() for m in self.moves],
                'planned_moves': [m.to_dict() for m in self.planned_moves],
                'failed_moves': [
                    {'path': path, 'reason': reason}
                    for path, reason in self.failed_moves
                ]
            }
