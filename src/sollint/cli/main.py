# src/sollint/cli/main.py
import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .. import __version__
from ..analysis import Analyzer, default_registry
from ..config import LintConfig, parse_severity
from ..error_reporter import ConfigError, SollintError, SolParseError, SolSyntaxError
from ..findings import RuleKind, Severity
from ..lexer import Lexer
from ..parser import Parser
from ..reporting import ConsoleReporter, JsonReporter

console = Console()
# Logs go to stderr so `--format json` output stays parseable
log_console = Console(stderr=True)

EXIT_FINDINGS = 1
EXIT_PARSE_ERROR = 2

RULE_NAMES = [r.value for r in RuleKind]
SEVERITY_NAMES = [s.value for s in Severity]


def setup_logging(level):
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(RichHandler(
        console=log_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    ))
    logging.getLogger("sollint").setLevel(level)


def collect_sources(paths):
    """Expand PATHS into a sorted, de-duplicated list of .sol files."""
    files = []
    for path in paths:
        if os.path.isdir(path):
            for dirpath, _, filenames in os.walk(path):
                files.extend(os.path.join(dirpath, name) for name in filenames if name.endswith(".sol"))
        else:
            files.append(path)
    return sorted(set(files))


def build_config(config_path, rules, disable, report_all, strict_usage, fail_on):
    try:
        config = LintConfig.load(config_path)
        config = config.with_overrides(
            enabled_rules=frozenset(RuleKind(r) for r in rules) if rules else None,
            report_all_destructive_calls=True if report_all else None,
            count_nested_references=True if strict_usage else None,
            fail_on=parse_severity(fail_on) if fail_on else None,
        )
        return config.disable(disable)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="'--config'")


def _read(file):
    with open(file, "r", encoding="utf-8") as f:
        return f.read()


@click.group()
@click.version_option(version=__version__, prog_name="sollint")
def cli():
    """sollint - static checks for Solidity contracts"""
    pass


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="JSON config file (default: ./sollint.json if present)")
@click.option("--rule", "-r", "rules", multiple=True, type=click.Choice(RULE_NAMES),
              help="Only run these rules (repeatable)")
@click.option("--disable", "-d", multiple=True, type=click.Choice(RULE_NAMES),
              help="Skip these rules (repeatable)")
@click.option("--report-all", is_flag=True,
              help="Report every unprotected destructive call, not only the first per function")
@click.option("--strict-usage", is_flag=True,
              help="Count any reference to a state variable as a use")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              show_default=True)
@click.option("--fail-on", type=click.Choice(SEVERITY_NAMES),
              help="Exit with status 1 when a finding of this severity or higher is found")
@click.option("--verbose", "-v", count=True, help="-v for progress, -vv for debug output")
def check(paths, config_path, rules, disable, report_all, strict_usage, output_format, fail_on, verbose):
    """Analyze Solidity files or directories"""
    config = build_config(config_path, rules, disable, report_all, strict_usage, fail_on)
    if verbose:
        setup_logging(logging.DEBUG if verbose > 1 else logging.INFO)
    else:
        setup_logging(config.log_level)

    reporter = JsonReporter() if output_format == "json" else ConsoleReporter(console)
    analyzer = Analyzer(config)
    failed = False
    threshold_met = False

    for file in collect_sources(paths):
        try:
            report = analyzer.analyze_path(file)
        except SolParseError as e:
            failed = True
            reporter.report_error(file, "\n".join([f"{file}: parse failed"] + e.errors))
            continue
        except (SollintError, OSError, UnicodeDecodeError) as e:
            failed = True
            reporter.report_error(file, str(e))
            continue
        reporter.report(report)
        if config.fail_on is not None and report.has_findings_at_least(config.fail_on):
            threshold_met = True

    reporter.finish()
    if failed:
        sys.exit(EXIT_PARSE_ERROR)
    if threshold_met:
        sys.exit(EXIT_FINDINGS)


@cli.command()
def rules():
    """List available rules"""
    table = Table(title="Rules")
    table.add_column("Rule", style="magenta")
    table.add_column("Severity", style="yellow")
    table.add_column("Description")
    for rule in default_registry():
        table.add_row(rule.kind.value, rule.severity.value, rule.description)
    console.print(table)


def _ast_tree(node, tree):
    for child in node.children():
        _ast_tree(child, tree.add(escape(repr(child))))
    return tree


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def ast(file):
    """Show the AST of a Solidity file"""
    try:
        parser = Parser(Lexer(_read(file), file))
        unit = parser.parse_source_unit()
    except SolSyntaxError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(EXIT_PARSE_ERROR)

    if parser.errors:
        console.print("[bold red]Parser Errors:[/bold red]")
        for error in parser.errors:
            console.print(f"  {escape(error)}")
        sys.exit(EXIT_PARSE_ERROR)

    console.print(Panel.fit(
        _ast_tree(unit, Tree(escape(repr(unit)))),
        title="[bold blue]Abstract Syntax Tree[/bold blue]",
        border_style="blue",
    ))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def tokens(file):
    """Show the tokens of a Solidity file"""
    try:
        token_list = Lexer(_read(file), file).tokenize()
    except SolSyntaxError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(EXIT_PARSE_ERROR)

    table = Table(title="Tokens")
    table.add_column("Type", style="cyan")
    table.add_column("Literal", style="green")
    table.add_column("Line", style="yellow")
    table.add_column("Column", style="yellow")
    for token in token_list:
        table.add_row(escape(token.type), escape(token.literal), str(token.line), str(token.column))
    console.print(table)


if __name__ == "__main__":
    cli()
