# utils/report_generator.py

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from config import ScanConfig
from core.models import MoveRecord, RunStats
from utils.file_utils import format_file_size


class DuplicateReportGenerator:
    """
    Generate reports for a finished detection run
    """

    def build_report(self, stats: RunStats, config: ScanConfig) -> Dict:
        """Collect run settings, counters and relocations into one dict"""
        records = stats.planned_moves if config.dry_run else stats.moves
        relocated_bytes = self._calculate_relocated_size(records)

        return {
            'generated': datetime.now().isoformat(),
            'input_dir': str(config.input_dir),
            'output_dir': str(config.output_dir),
            'thumbnail_size': config.thumbnail_size,
            'dry_run': config.dry_run,
            'relocated_bytes': relocated_bytes,
            'relocated_size': format_file_size(relocated_bytes),
            'stats': stats.to_dict()
        }

    def generate_report(self,
                        stats: RunStats,
                        config: ScanConfig,
                        output_path: str = "duplicate_report.json") -> Path:
        """
        Write the JSON report and return its path
        """
        report = self.build_report(stats, config)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(report, f, indent=2)

        return path

    def _calculate_relocated_size(self, records: List[MoveRecord]) -> int:
        """Bytes moved (or, in a dry run, that would be moved)"""
        total_size = 0

        for record in records:
            # after a real move the file lives at the destination
            for candidate in (record.destination, record.source):
                try:
                    size = Path(candidate).stat().st_size
                except OSError:
                    continue
                if size:
                    total_size += size
                    break

        return total_size
