"""Command-line entry point for the PR engagement analyzer."""

import os
import sys
import logging
import argparse
from typing import List, Optional

from dotenv import load_dotenv

from .config import (
    AnalysisConfig, validate_config, validate_weight, validate_depth_diminishing_factor,
    DEFAULT_DAYS, DEFAULT_BREADTH_WEIGHT, DEFAULT_DEPTH_DIMINISHING_FACTOR,
)
from .collector import DEFAULT_BATCH_SIZE
from .engagement_analyzer import EngagementAnalyzer
from .errors import ConfigurationError, EngagementError
from .output import OutputFormatter


def configure_logging():
    """Configure logging (can be overridden by LOG_LEVEL environment variable)."""
    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%m/%d/%Y %I:%M:%S %p'
    )


def _argparse_type(validator):
    def parse(value):
        try:
            return validator(value)
        except ConfigurationError as e:
            raise argparse.ArgumentTypeError(str(e))
    parse.__name__ = validator.__name__
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pr-engagement',
        description='Analyze team engagement patterns on GitHub pull requests'
    )
    parser.add_argument('-o', '--org', required=True, help='GitHub organization')
    parser.add_argument('-r', '--repo', required=True, help='GitHub repository')
    parser.add_argument('-t', '--days', type=int, default=DEFAULT_DAYS,
                        help=f'Number of days to look back (default: {DEFAULT_DAYS})')
    parser.add_argument('-e', '--end', type=int, default=0,
                        help='Number of days back to end the window (default: now)')
    parser.add_argument('-d', '--debug', action='store_true',
                        help='Show the detailed per-user activity report')
    parser.add_argument('-s', '--depth-diminishing-factor', dest='depth_diminishing_factor',
                        type=_argparse_type(validate_depth_diminishing_factor),
                        default=DEFAULT_DEPTH_DIMINISHING_FACTOR,
                        help='Rate at which the importance of ever-increasing depth diminishes (>0 <1)')
    parser.add_argument('-w', '--weight', dest='breadth_weight', type=_argparse_type(validate_weight),
                        default=DEFAULT_BREADTH_WEIGHT, help='Weight for engagement breadth (>= 0.25)')
    parser.add_argument('--staging-dir',
                        help='Keep the fetched JSON documents in this directory (earlier documents are replaced)')
    parser.add_argument('--batch-size', type=int, default=DEFAULT_BATCH_SIZE,
                        help=f'PRs whose reviews and comments are fetched concurrently (default: {DEFAULT_BATCH_SIZE})')
    parser.add_argument('--max-throttle-retries', type=int, default=None,
                        help='Give up after this many throttled retries of a page (default: retry forever)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script.

    Returns:
        Process exit code
    """
    # Load environment variables from .env file if it exists
    load_dotenv()
    configure_logging()

    args = build_parser().parse_args(argv)

    try:
        config = validate_config(AnalysisConfig.from_days(
            args.org,
            args.repo,
            os.environ.get('GITHUB_TOKEN'),
            days=args.days,
            end_days=args.end,
            breadth_weight=args.breadth_weight,
            depth_diminishing_factor=args.depth_diminishing_factor,
            debug=args.debug,
            staging_dir=args.staging_dir,
            batch_size=args.batch_size,
            max_throttle_retries=args.max_throttle_retries
        ))
    except ConfigurationError as e:
        logging.error(f"Invalid configuration: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output_formatter = OutputFormatter(config, use_color=sys.stdout.isatty())
    output_formatter.print_header()

    try:
        result = EngagementAnalyzer(config).run()
    except EngagementError as e:
        logging.error(f"Analysis of {config.org}/{config.repo} failed: {e}", exc_info=config.debug)
        output_formatter.print_error(str(e))
        return 1

    output_formatter.print_summary(result.rows)
    if config.debug:
        output_formatter.print_detailed_report(result.log)

    return 0


if __name__ == '__main__':
    sys.exit(main())
