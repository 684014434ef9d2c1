"""Main entry point for the card spend analysis"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables FIRST, before any other imports
# Find the .env file in the project root
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

from card_insights.orchestrator.analysis_runner import AnalysisRunner
from card_insights.tools.export_tools import export_results
from card_insights.utils.logging import get_logger

logger = get_logger(__name__)


def main():
    """Main entry point"""
    logger.info("=" * 60)
    logger.info("CREDIT CARD SPEND INSIGHTS")
    logger.info("=" * 60)

    try:
        runner = AnalysisRunner()
        results = runner.run()

        output_dir = os.getenv("OUTPUT_DIR")
        if output_dir:
            export_results(results, output_dir)

        # Print summary
        logger.info("=" * 60)
        logger.info("ANALYSIS SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Run ID: {results['run_id']}")
        logger.info(f"Status: {results['status']}")
        logger.info(f"Transactions: {results['profile'].row_count}")
        for problem in results['problems']:
            logger.info(f"{problem.problem_id}: {problem.row_count} rows")
        logger.info(f"Duration: {results['duration_seconds']:.2f}s")
        logger.info("=" * 60)

        return results

    except Exception as e:
        logger.error(f"Main execution failed: {e}")
        raise


if __name__ == "__main__":
    main()
