"""Command-line interface for datafilter.

The ``datafilter`` console script is ``run_filter.main``.
"""

from datafilter.cli.run_filter import main, run_filter

__all__ = ['main', 'run_filter']
