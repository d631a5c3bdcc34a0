#!/usr/bin/env python3
"""
COMPOSCRIPT CLI
---------------
Command line entry point. Translates user commands into engine actions:

    composcript init            configure the project
    composcript create my-tag   scaffold a component
    composcript build           compile every component into the bundle
    composcript watch           rebuild on change

Author: Composcript Team
Date: 2026-10-19
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from composcript.cli.formatter import BuildFormatter, console
from composcript.core.config import BuildConfig, load_config, save_config
from composcript.core.engine import BuildEngine, BuildResult
from composcript.core.errors import ComposcriptError

__version__ = "0.1.0"

TAG_NAME_PATTERN = re.compile(r"^[a-z]+-(-?[a-z0-9]+)+$")

COMPONENT_TEMPLATE = """class {class_name} {{
\t// <{tag} />

\tcreated() {{
\t\t<This></This>
\t}}
}}
"""


def class_name_for(tag: str) -> str:
    """my-fancy-button -> MyFancyButton"""
    return "".join(word[:1].upper() + word[1:] for word in tag.split("-") if word)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


class ComposcriptCLI:
    """
    CLI wrapper around the BuildEngine.
    Provides prompts for scaffolding and visual feedback for builds.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="composcript",
            description="Composcript - compile markup-embedded components into custom elements",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = BuildFormatter(console)
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"composcript v{__version__}")
        self.parser.add_argument("--project", default=".", help="Project root (default: current directory)")
        self.parser.add_argument("--verbose", action="store_true", help="Show debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        init_parser = subparsers.add_parser("init", help="Create composcript.yaml")
        init_parser.add_argument("--components", help="Components directory (skips the prompt)")
        init_parser.add_argument("-y", "--yes", action="store_true", help="Accept defaults")

        create_parser = subparsers.add_parser("create", help="Scaffold a new component")
        create_parser.add_argument("tag", nargs="?", help="Component tag name, e.g. my-component")

        build_parser = subparsers.add_parser("build", help="Compile all components")
        build_parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
        build_parser.add_argument("--dry-run", action="store_true", help="Compile without writing the bundle")
        build_parser.add_argument("--diff", action="store_true", help="Show changes against the current bundle")

        subparsers.add_parser("watch", help="Rebuild whenever a component changes")

    def _load(self, args: argparse.Namespace) -> BuildConfig:
        return load_config(Path(args.project))

    def cmd_init(self, args: argparse.Namespace) -> int:
        console.print("\n[green]Initializing Composcript config[/green]\n")
        components = args.components
        if components is None and not args.yes:
            components = console.input("[bold yellow]Components directory[/bold yellow] (default: ./components): ")
        config = BuildConfig(project_root=Path(args.project).resolve(), components_dir=components or "./components")

        path = save_config(config)
        console.print(f"Wrote [cyan]{path}[/cyan]")

        if not config.components_path.exists():
            console.print("Creating components directory")
            config.components_path.mkdir(parents=True)
        if not config.output_path.exists():
            config.output_path.write_text("", encoding="utf-8")

        src = f"{config.components_dir.replace('./public', '')}/{config.output_name}"
        console.print("You're all set! Run [cyan]composcript watch[/cyan] and add this to your HTML file:")
        console.print(f'<script src="{src}"></script>', markup=False, highlight=True)
        return 0

    def cmd_create(self, args: argparse.Namespace) -> int:
        config = self._load(args)
        tag = args.tag or console.input("[bold yellow]Component tag name[/bold yellow] (e.g. my-component): ")

        if not tag or not TAG_NAME_PATTERN.match(tag):
            console.print(
                f"[bold red]<{tag}></{tag}>: Invalid tag name[/bold red], use kebab-case "
                "(lowercase letters and hyphens) with at least two words and no numbers in the first word"
            )
            return 1

        class_name = class_name_for(tag)
        file_path = config.components_path / f"{tag}{config.extension}"
        if file_path.exists():
            console.print(f"[bold red]Error:[/bold red] {file_path} already exists")
            return 1

        config.components_path.mkdir(parents=True, exist_ok=True)
        file_path.write_text(COMPONENT_TEMPLATE.format(class_name=class_name, tag=tag), encoding="utf-8")
        console.print(f"Created [yellow]{class_name}[/yellow] [cyan]<{tag} />[/cyan] in [green]{file_path}[/green]")
        return 0

    def cmd_build(self, args: argparse.Namespace) -> int:
        engine = BuildEngine(self._load(args))

        if args.quiet:
            result = engine.build(quiet=True, dry_run=args.dry_run)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task("Compiling components...", total=None)
                result = engine.build(
                    dry_run=args.dry_run,
                    progress_callback=lambda done, total: progress.update(task_id, completed=done, total=total),
                )

        return self._report(engine, result, show_diff=args.diff, quiet=args.quiet)

    def _report(self, engine: BuildEngine, result: BuildResult, show_diff: bool = False, quiet: bool = False) -> int:
        self.formatter.show_diagnostics(result)
        if not quiet:
            self.formatter.print_report(result)
            self.formatter.print_summary(engine.generate_summary(result), result)
        if show_diff and not result.aborted:
            self.formatter.display_diff(result.previous_output, result.output, result.output_path.name)
        return 1 if result.aborted else 0

    def cmd_watch(self, args: argparse.Namespace) -> int:
        engine = BuildEngine(self._load(args))
        console.print(f"[green]Watching for changes in {engine.config.components_path}[/green]")

        def on_result(result: BuildResult):
            self._report(engine, result, quiet=True)

        try:
            engine.watch(on_result=on_result)
        except KeyboardInterrupt:
            engine.stop_watching()
            console.print("\n[bold red]Stopped watching.[/bold red]")
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        setup_logging(args.verbose)

        commands = {
            "init": self.cmd_init,
            "create": self.cmd_create,
            "build": self.cmd_build,
            "watch": self.cmd_watch,
        }
        if args.command not in commands:
            console.print(Panel.fit(f"[bold cyan]Composcript v{__version__}[/bold cyan]", border_style="cyan"))
            self.parser.print_help()
            return 1

        try:
            return commands[args.command](args)
        except ComposcriptError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            return 1


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(ComposcriptCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
