"""CLI entry point for dotparser."""

import json
import logging
import sys

import click

from dotparser.config import ParseConfig
from dotparser.parsers import parse


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option(
    "--format",
    "-f",
    "diagram_format",
    type=click.Choice(["dot", "plantuml"]),
    default=None,
    help="Input format (detected from content by default)",
)
@click.option("--strict", "-s", is_flag=True, help="Reject DOT lines the parser does not recognize")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Log parser decisions to stderr")
def main(input: str | None, diagram_format: str | None, strict: bool, output: str | None, verbose: bool) -> None:
    """DOT or PlantUML diagram to a stream of graph events, one JSON object per line."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        events = parse(text, ParseConfig(strict=strict, diagram_format=diagram_format))
    except ValueError as e:
        click.echo(f"parse error:\n{e}", err=True)
        sys.exit(1)

    rendered = "".join(json.dumps(event.to_dict()) + "\n" for event in events)

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
