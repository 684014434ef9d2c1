"""Problem statements and the runner that executes them"""

from .problem_statements import PROBLEM_STATEMENTS, ProblemStatement, get_problem_statement
from .analysis_runner import AnalysisRunner

__all__ = ["PROBLEM_STATEMENTS", "ProblemStatement", "get_problem_statement", "AnalysisRunner"]
