"""Export of problem statement result sets"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any
from card_insights.utils.errors import CardInsightsError
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)


def export_results(run_summary: Dict[str, Any], output_dir: str) -> Dict[str, str]:
    """
    Write each result set to CSV and the run summary to summary.json

    Args:
        run_summary: Output of AnalysisRunner.run()
        output_dir: Directory to write into (created if missing)

    Returns:
        Mapping of problem id (and 'summary') to written file path

    Raises:
        CardInsightsError: If the directory or files cannot be written
    """
    output_path = Path(output_dir)
    written = {}

    try:
        output_path.mkdir(parents=True, exist_ok=True)

        for problem_id, frame in run_summary.get('results', {}).items():
            csv_path = output_path / f"{problem_id}.csv"
            frame.to_csv(csv_path, index=False)
            written[problem_id] = str(csv_path)

        summary = {
            'run_id': run_summary.get('run_id'),
            'status': run_summary.get('status'),
            'exported_at': datetime.now().isoformat(),
            'duration_seconds': run_summary.get('duration_seconds'),
            'problems': [result.model_dump() for result in run_summary.get('problems', [])],
        }
        summary_path = output_path / "summary.json"
        with open(summary_path, 'w') as f:
            json.dump(summary, f, indent=2, default=str)
        written['summary'] = str(summary_path)

    except OSError as e:
        raise CardInsightsError(f"Failed to export results to {output_dir}: {e}")

    logger.info(f"Exported {len(written) - 1} result sets", output_dir=str(output_path))
    return written
