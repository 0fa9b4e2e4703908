#!/usr/bin/env python3
"""
PR Engagement Metrics
Analyzes how broadly and how deeply team members engage with each other's pull requests.
"""

import sys

from pr_engagement.cli import main


if __name__ == "__main__":
    sys.exit(main())
