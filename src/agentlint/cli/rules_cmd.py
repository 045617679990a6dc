"""``agentlint rules`` -- Browse the built-in rule catalogue.

Subcommands:
    list [--group GROUP] -- Table of rule ids, groups, severities, titles.
    explain RULE_ID      -- Full description and recommendation.
"""

from __future__ import annotations

import sys

import click

from agentlint.cli.output import print_rule_detail, print_rules_table, render_json
from agentlint.core.ir import to_dict
from agentlint.core.policy.models import FORMAT_CHOICES
from agentlint.core.rules import RULE_GROUPS, RuleEngine
from agentlint.scanner import EXIT_USAGE


@click.group("rules")
def rules_group() -> None:
    """List and explain detection rules."""


@rules_group.command("list")
@click.option("--group", type=click.Choice(RULE_GROUPS), default=None, help="Only rules in this group.")
@click.option("--format", "output_format", type=click.Choice(FORMAT_CHOICES), default="text",
              help="Output format: text (default) or json.")
def list_command(group: str | None, output_format: str) -> None:
    """List every built-in rule."""
    engine = RuleEngine()
    definitions = engine.rules_by_group(group) if group else engine.all_rules()
    if output_format == "json":
        render_json(to_dict(definitions))
    else:
        print_rules_table(definitions)


@rules_group.command("explain")
@click.argument("rule_id")
def explain_command(rule_id: str) -> None:
    """Describe RULE_ID (e.g. EXEC-001) and how to fix its findings."""
    rule = RuleEngine().get_rule(rule_id)
    if rule is None:
        click.echo(f"Unknown rule: {rule_id}", err=True)
        sys.exit(EXIT_USAGE)
    print_rule_detail(rule.definition)
