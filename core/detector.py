# core/detector.py

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, Optional

from tqdm import tqdm

from components.relocation import RelocationPolicy
from config import ScanConfig
from core.errors import MoveFailedError, SignatureFailedError
from core.image_access import is_supported_image
from core.models import RunStats, SignatureGroups
from core.ranking import rank_by_resolution
from core.signature import generate_signature
from utils.file_utils import walk_files

logger = logging.getLogger(__name__)


def _unique_paths(paths: Iterable[str]) -> Iterator[str]:
    """Yield each path once, in first-seen order"""
    seen = set()
    for path in paths:
        key = str(path)
        if key in seen:
            logger.debug("Skipping repeated path: %s", key)
            continue
        seen.add(key)
        yield path


class DuplicateDetector:
    """
    Finds images with identical normalized content and moves every copy
    but the highest-resolution one into the output directory.

    A run goes through two phases:
      1. Scanning: every file is classified, images are signed and added
         to a signature -> paths map. Per-file failures are skipped.
      2. Relocating: for each group of two or more files, the largest
         image stays and the rest are moved.

    All state is created inside run(), so one detector can be run again.
    """

    def __init__(self, config: ScanConfig):
        self.config = config

    def run(self, paths: Optional[Iterable[str]] = None) -> RunStats:
        """
        Execute a full detection run.

        Args:
            paths: Files to consider. Defaults to a recursive walk of the
                input directory, skipping the output directory.

        Raises:
            TraversalFailedError: the directory walk failed
            MoveFailedError: a relocation failed (unless best_effort)
        """
        stats = RunStats()
        groups = SignatureGroups()

        if paths is None:
            paths = walk_files(self.config.input_dir, exclude=[self.config.output_dir])

        logger.debug("Input directory: %s", self.config.input_dir)
        logger.debug("Output directory: %s", self.config.output_dir)
        logger.debug("Thumbnail size: %d", self.config.thumbnail_size)

        self._scan(paths, groups, stats)
        groups.freeze()

        stats.duplicate_groups = groups.count_duplicates()
        self._process_duplicates(groups, stats)

        logger.info(
            "Run complete: %d files, %d images, %d duplicate groups, %d moved",
            stats.total_files, stats.images_found,
            stats.duplicate_groups, stats.files_moved
        )
        return stats

    def _scan(self, paths: Iterable[str], groups: SignatureGroups, stats: RunStats):
        paths = _unique_paths(paths)
        progress = dict(desc="Scanning files", unit="file", disable=not self.config.show_progress)

        if self.config.n_workers <= 1:
            for path in tqdm(paths, **progress):
                self._scan_file(path, groups, stats)
            return

        with ThreadPoolExecutor(max_workers=self.config.n_workers) as executor:
            # list() drains the results so worker exceptions surface here
            list(tqdm(
                executor.map(lambda p: self._scan_file(p, groups, stats), paths),
                **progress
            ))

    def _scan_file(self, path: str, groups: SignatureGroups, stats: RunStats):
        stats.increment('total_files')

        if not is_supported_image(path):
            return

        stats.increment('images_found')

        try:
            sig = generate_signature(path, self.config.thumbnail_size)
        except SignatureFailedError as e:
            stats.increment('signature_failures')
            if self.config.verbose:
                logger.warning("Failed to process image %s: %s", path, e.reason)
            else:
                logger.debug("Failed to process image %s: %s", path, e.reason)
            return

        groups.add(sig, str(path))
        logger.debug("Processed: %s (sig: %s...)", path, sig[:8])

    def _process_duplicates(self, groups: SignatureGroups, stats: RunStats):
        policy = RelocationPolicy(self.config.output_dir)

        for sig, files in groups.duplicate_groups():
            logger.info("Found %d duplicates with signature %s...", len(files), sig[:8])

            ranked = rank_by_resolution(files)
            if not ranked:
                logger.warning("No readable files left in group %s..., skipping", sig[:8])
                continue

            keeper, others = ranked[0], ranked[1:]
            logger.debug("Keeping %s", keeper)

            for path in others:
                if self.config.dry_run:
                    record = policy.plan(path)
                    stats.record_planned(record)
                    logger.info("Would move: %s -> %s", record.source, record.destination)
                    continue

                try:
                    stats.record_move(policy.relocate(path))
                except MoveFailedError as e:
                    if not self.config.best_effort:
                        raise
                    logger.error("Skipping %s: %s", path, e.reason)
                    stats.record_failure(str(path), e.reason)
