"""Command-line interface for markdown-enclave."""

import json
from pathlib import Path

import click

from .config import EnclaveConfig


def copy_default_templates(target_dir: Path, force: bool = False) -> list[str]:
    """Copy bundled embed templates to target directory.

    Returns list of created file paths.
    """
    import importlib.resources

    created = []
    try:
        templates_pkg = importlib.resources.files("markdown_enclave.defaults.embeds")
        target_dir.mkdir(parents=True, exist_ok=True)

        for item in templates_pkg.iterdir():
            if item.is_file() and item.name.endswith(".html"):
                target_file = target_dir / item.name
                if force or not target_file.exists():
                    target_file.write_text(item.read_text(encoding="utf-8"))
                    created.append(str(target_file))
    except (ImportError, TypeError):
        pass
    return created


@click.group()
@click.version_option(package_name="markdown-enclave")
def main():
    """markdown-enclave - Rich embeds for markdown image references."""
    pass


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None
)
@click.option("--no-iframe", is_flag=True, help="Render widgets as plain links")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with an [enclave] table",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def render(
    source: Path,
    output: Path | None,
    no_iframe: bool,
    config_path: Path | None,
    verbose: bool,
):
    """Render a markdown file to HTML."""
    from .logging import setup_logging
    from .markdown_utils import parse_markdown_file, render_markdown

    setup_logging(verbose=verbose)

    config = EnclaveConfig.load(config_path) if config_path else EnclaveConfig()
    if no_iframe:
        config.iframe_disabled = True

    _, content = parse_markdown_file(source)
    html_content = render_markdown(content, config)

    if output is None:
        click.echo(html_content)
    else:
        output.write_text(html_content + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)


@main.command()
@click.argument("destination")
@click.option("--title", default="", help="Image title")
@click.option("--alt", default="", help="Image alt text")
def classify(destination: str, title: str, alt: str):
    """Show how an image destination is classified."""
    from .classifier import classify as do_classify
    from .errors import UrlParseError

    try:
        result = do_classify(destination, title, alt)
    except UrlParseError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(
        json.dumps(
            {
                "provider": result.provider.value,
                "object_id": result.object_id,
                "url": result.url.geturl(),
                "theme": result.theme,
                "params": result.params,
            },
            indent=2,
        )
    )


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("enclave-templates"),
    help="Directory to copy templates into",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def templates(output: Path, force: bool):
    """Copy the bundled embed templates for customization."""
    created = copy_default_templates(output, force)
    if created:
        click.echo(f"Created {output}/ ({len(created)} templates)")
    else:
        click.echo("No templates copied (use --force to overwrite)")

    click.echo("\nSet templates_dir in the [enclave] table to use them")


if __name__ == "__main__":
    main()
