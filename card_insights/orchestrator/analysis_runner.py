"""Analysis runner - executes the problem statements over the loaded dataset"""

import time
import uuid
from datetime import datetime
from typing import Dict, Any, Iterable, Optional
import pandas as pd
from card_insights.orchestrator.problem_statements import PROBLEM_STATEMENTS, get_problem_statement
from card_insights.models.results import ProblemResult
from card_insights.tools.dataset_client import get_dataset
from card_insights.tools.exploration_tools import profile_dataset
from card_insights.utils.config_loader import load_config, get_problem_config
from card_insights.utils.errors import AnalysisError
from card_insights.utils.logging import get_logger
from card_insights.utils.metrics import (
    analysis_completion_time,
    problem_execution_time,
    problem_result_rows,
    problem_runs,
)

logger = get_logger(__name__)


class AnalysisRunner:
    """Runs the problem statements against one transactions table"""

    def __init__(self, config: Optional[Dict[str, Any]] = None, dataset: Optional[pd.DataFrame] = None):
        self.run_id = str(uuid.uuid4())
        self.config = config if config is not None else load_config()
        self._dataset = dataset
        self.start_time = None

    @property
    def dataset(self) -> pd.DataFrame:
        """Transactions table, loaded from the configured CSV on first use"""
        if self._dataset is None:
            self._dataset = get_dataset(self.config)
        return self._dataset

    def run_problem(self, problem_id: str, **overrides) -> pd.DataFrame:
        """
        Execute a single problem statement

        Args:
            problem_id: Id from PROBLEM_STATEMENTS
            **overrides: Parameters taking precedence over the configuration

        Returns:
            Result set of the query

        Raises:
            AnalysisError: If the problem is unknown or its query fails
        """
        statement = get_problem_statement(problem_id)
        params = {**get_problem_config(self.config, problem_id), **overrides}

        try:
            with problem_execution_time.labels(problem_id=problem_id).time():
                result = statement.func(self.dataset, **params)
        except AnalysisError:
            problem_runs.labels(problem_id=problem_id, status='failure').inc()
            raise
        except (KeyError, TypeError, ValueError) as e:
            problem_runs.labels(problem_id=problem_id, status='failure').inc()
            raise AnalysisError(f"Problem {problem_id} failed: {e}")

        problem_runs.labels(problem_id=problem_id, status='success').inc()
        problem_result_rows.labels(problem_id=problem_id).set(len(result))
        return result

    def run(self, problem_ids: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Execute the selected problem statements (all by default)

        Returns:
            Summary dictionary with run id, status, per-problem
            ProblemResult records and the result frames keyed by problem id
        """
        self.start_time = time.time()
        selected = list(problem_ids) if problem_ids else list(PROBLEM_STATEMENTS)
        logger.info(f"Starting analysis run: {self.run_id}", problems=selected)

        profile = profile_dataset(self.dataset)
        results = {}
        problems = []

        for problem_id in selected:
            statement = get_problem_statement(problem_id)
            started = time.time()

            try:
                frame = self.run_problem(problem_id)
            except AnalysisError as e:
                logger.error(f"Problem {problem_id} failed: {e}", run_id=self.run_id)
                raise

            duration = time.time() - started
            results[problem_id] = frame
            problems.append(ProblemResult(
                problem_id=problem_id,
                title=statement.title,
                row_count=len(frame),
                duration_seconds=duration,
                columns=[str(col) for col in frame.columns],
            ))
            logger.info(f"{problem_id}: {len(frame)} rows", duration_seconds=round(duration, 4))

        duration = time.time() - self.start_time
        analysis_completion_time.observe(duration)

        summary = {
            'run_id': self.run_id,
            'status': 'completed',
            'started_at': datetime.fromtimestamp(self.start_time).isoformat(),
            'duration_seconds': duration,
            'profile': profile,
            'problems': problems,
            'results': results,
        }

        logger.info(f"Analysis complete: {self.run_id} ({duration:.2f}s)")
        return summary
