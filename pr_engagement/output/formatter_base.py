"""Output formatting and display for engagement analysis results."""

from ..config import AnalysisConfig


# ANSI color codes
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
CYAN = '\033[96m'
GRAY = '\033[90m'
BOLD = '\033[1m'
RESET = '\033[0m'

MAX_NAME_LENGTH = 20


class OutputFormatter:
    """Formats and prints engagement analysis results."""

    def __init__(self, config: AnalysisConfig, use_color: bool = True):
        """Initialize the output formatter.

        Args:
            config: Configuration of the analysed run (repository, window, weights)
            use_color: Whether to emit ANSI color codes
        """
        self.config = config
        self.use_color = use_color

    def _color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{RESET}"

    @staticmethod
    def _display_name(user: str) -> str:
        return user[:MAX_NAME_LENGTH]

    def _score_color(self, score: float) -> str:
        if score >= 0.5:
            return GREEN
        if score >= 0.25:
            return YELLOW
        return RED

    def _pr_url(self, pr_number: int) -> str:
        return f"{self.config.web_url}/pull/{pr_number}"


# Import and attach methods from submodules
from .console import print_header, print_summary, print_detailed_report, print_error

OutputFormatter.print_header = print_header
OutputFormatter.print_summary = print_summary
OutputFormatter.print_detailed_report = print_detailed_report
OutputFormatter.print_error = print_error
