#!/usr/bin/env python3
"""
YAMLANALYZER CLI - Terminal Front-End
-------------------------------------
Thin adapter over YamlAnalyzer: reads a file (or stdin), runs one
analysis, and renders the report. No analysis logic lives here.

    yamlanalyzer analyze manifest.yaml
    yamlanalyzer analyze - --fix < manifest.yaml
    yamlanalyzer fix manifest.yaml --diff --write

Author: YAML Analyzer Team
Date: 2026-10-19
"""

import os
import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from yamlanalyzer.cli.formatter import ReportFormatter
from yamlanalyzer.core.config import AnalyzerSettings, ConfigError
from yamlanalyzer.core.engine import YamlAnalyzer

__version__ = "1.0.0"

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE_ERROR = 2

logger = logging.getLogger("yamlanalyzer.cli")

# Global console for consistent styling across the application
console = Console()


class YamlAnalyzerCLI:
    """
    CLI wrapper that translates user commands into engine calls.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="yamlanalyzer",
            description="YAML Analyzer - parse diagnostics, auto-fix and manifest suggestions",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ReportFormatter(console)
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=f"yamlanalyzer v{__version__}")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        self.parser.add_argument("--config", help="Settings file (default: ./.yamlanalyzer.yaml if present)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        # 'analyze' subcommand - parse, diagnose and suggest
        analyze_parser = subparsers.add_parser("analyze", help="🔍 Parse YAML and explain problems")
        analyze_parser.add_argument("path", help="Path to a YAML file, or '-' for stdin")
        analyze_parser.add_argument("--fix", action="store_true", help="Run the auto-fixer before parsing")
        analyze_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

        # 'fix' subcommand - normalizer only
        fix_parser = subparsers.add_parser("fix", help="🔧 Apply conservative auto-fixes")
        fix_parser.add_argument("path", help="Path to a YAML file, or '-' for stdin")
        fix_parser.add_argument("--diff", action="store_true", help="Show a diff instead of the fixed text")
        fix_parser.add_argument("--write", action="store_true", help="Write the fixed text back to the file")
        fix_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask before writing")

    def _load_settings(self, args: argparse.Namespace) -> AnalyzerSettings:
        if args.config:
            return AnalyzerSettings.load(args.config)
        return AnalyzerSettings.discover(Path.cwd())

    def _read_input(self, path: str) -> str:
        if path == "-":
            return sys.stdin.read()
        return Path(path).read_text(encoding='utf-8')

    def _source_name(self, path: str) -> str:
        return "<stdin>" if path == "-" else Path(path).name

    def _run_analyze(self, engine: YamlAnalyzer, args: argparse.Namespace) -> int:
        text = self._read_input(args.path)
        report = engine.analyze(text, auto_fix=args.fix)

        if args.json:
            sys.stdout.write(json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n")
        else:
            self.formatter.show_report(report, self._source_name(args.path))

        return EXIT_PARSE_ERROR if report.error is not None else EXIT_OK

    def _run_fix(self, engine: YamlAnalyzer, args: argparse.Namespace) -> int:
        text = self._read_input(args.path)
        result = engine.normalize(text)
        name = self._source_name(args.path)

        if args.diff:
            self.formatter.show_applied_fixes(result)
            self.formatter.display_diff(text, result.fixed_text, name)
        elif not args.write:
            sys.stdout.write(result.fixed_text)

        if args.write:
            if args.path == "-":
                console.print("[bold red]Error:[/bold red] --write needs a file path, not stdin.")
                return EXIT_USAGE_ERROR
            if not result.changed:
                console.print(f"[dim]ℹ {escape(name)} is already normalized.[/dim]")
                return EXIT_OK
            if not args.yes and not self._confirm(name):
                console.print("[bold red]Operation cancelled by user.[/bold red]")
                return EXIT_OK
            self._atomic_write(Path(args.path), result.fixed_text)
            console.print(f"[bold green]✔ Wrote {escape(name)}[/bold green]")
        return EXIT_OK

    def _confirm(self, name: str) -> bool:
        choice = console.input(f"\n[bold yellow]Apply fixes to {escape(name)}? (y/N): [/bold yellow]").lower()
        return choice == 'y'

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_suffix(target_path.suffix + '.yamlanalyzer.tmp')
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise IOError(f"Atomic write failed: {e}")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]YAML Analyzer v{__version__}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit code."""
        args = self.parser.parse_args(argv)
        if not args.command:
            self.print_header("YAML Diagnostics & Auto-Fix")
            self.parser.print_help()
            return EXIT_OK

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(name)s: %(message)s",
        )

        try:
            engine = YamlAnalyzer(self._load_settings(args))
            if args.command == "analyze":
                return self._run_analyze(engine, args)
            return self._run_fix(engine, args)
        except ConfigError as e:
            console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Input/output failure", exc_info=True)
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return EXIT_USAGE_ERROR


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(YamlAnalyzerCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
