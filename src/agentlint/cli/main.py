"""AgentLint CLI -- Static analysis of AI coding-agent configuration files.

Entry point for the ``agentlint`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan      -- Analyse Claude Code / Cursor configuration under a path.
    diff      -- Compare capabilities between two directory trees.
    baseline  -- Create or inspect the accepted-findings baseline.
    rules     -- List and explain the built-in rules.

Usage::

    agentlint scan                          # Scan the current directory
    agentlint scan ./repo --format json     # Machine-readable report
    agentlint scan --update-baseline        # Accept current findings
    agentlint diff ./main ./feature         # Capability growth check
    agentlint baseline show .
    agentlint rules explain EXEC-001
"""

from __future__ import annotations

import click

from agentlint import __version__
from agentlint.cli.baseline_cmd import baseline_group
from agentlint.cli.diff_cmd import diff_command
from agentlint.cli.output import configure_logging
from agentlint.cli.rules_cmd import rules_group
from agentlint.cli.scan import scan_command


@click.group()
@click.version_option(version=__version__, prog_name="agentlint")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """AgentLint: Security linting for AI coding-agent configuration.

    Finds risky shell execution, file writes, network access, secret
    handling, hooks and instruction overrides in Claude Code and Cursor
    configuration, and recommends least-privilege permissions.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(diff_command)
cli.add_command(baseline_group)
cli.add_command(rules_group)
