"""Command-line interface for QuarryRead."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Sequence, Tuple

import click
import structlog
import yaml
from bs4 import FeatureNotFound, Tag

from quarryread import __version__
from quarryread.config import Config, find_config_file
from quarryread.dom.nodes import new_tag
from quarryread.exceptions import DocumentStructureError, TemplateError
from quarryread.extractor.models import TEMPLATE_FIELDS, ArticleMetadata, ExtractionOptions
from quarryread.extractor.readability import parse_document, parse_html
from quarryread.extractor.readerable import is_probably_readerable
from quarryread.observability import configure_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2

# Heading used for each metadata field of the output template
TEMPLATE_TAGS: Dict[str, str] = {
    "title": "h1",
    "byline": "h3",
    "excerpt": "p",
    "sitename": "h2",
    "url": "h2",
}


def parse_template(value: str) -> List[str]:
    """Split a comma-separated template and check every field name."""
    fields = [item.strip() for item in value.split(",") if item.strip()]
    for item in fields:
        if item not in TEMPLATE_FIELDS:
            raise TemplateError(item)
    return fields


def _template_value(field: str, metadata: ArticleMetadata, url: Optional[str]) -> Optional[str]:
    if field == "title":
        return metadata.title
    if field == "byline":
        return metadata.byline
    if field == "excerpt":
        return metadata.excerpt
    if field == "sitename":
        return metadata.site_name
    if field == "url":
        return url
    raise TemplateError(field)


def attach_metadata(article: Tag, metadata: ArticleMetadata, template: Sequence[str], url: Optional[str] = None) -> None:
    """Add the template's metadata headings around the article body.

    Fields listed before ``body`` go in front of the article's content, the
    rest are appended after it. Fields without a value are skipped.
    """
    body_first = next(iter(article.contents), None)
    past_body = False
    for field in template:
        if field == "body":
            past_body = True
            continue
        content = _template_value(field, metadata, url)
        if not content:
            continue
        heading = new_tag(TEMPLATE_TAGS[field])
        heading.string = content
        if past_body or body_first is None:
            article.append(heading)
        else:
            body_first.insert_before(heading)


def format_metadata(metadata: ArticleMetadata, readerable: bool) -> str:
    """Render the metadata as ``Label: value`` lines."""
    lines: List[str] = []
    if metadata.title:
        lines.append(f"Title: {metadata.title}")
    if metadata.byline:
        lines.append(f"Byline: {metadata.byline}")
    if metadata.excerpt:
        lines.append(f"Excerpt: {metadata.excerpt}")
    lines.append(f"Readerable: {'Yes' if readerable else 'No'}")
    if metadata.site_name:
        lines.append(f"Site name: {metadata.site_name}")
    direction = metadata.spelled_direction()
    if direction:
        lines.append(f"Text direction: {direction}")
    return "\n".join(lines)


def load_config(config_path: Optional[Path]) -> Config:
    """Load the configuration file given, or the one in the working directory."""
    path = config_path or find_config_file()
    if path is None:
        return Config()
    return Config.from_yaml(path)


def _log_level(verbose: int, configured: str) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return configured


def build_options(
    config: Config,
    base: Optional[str],
    template: Optional[str],
    keep_short: bool,
) -> Tuple[ExtractionOptions, List[str]]:
    """Apply the command-line overrides to the configured extraction options."""
    update: Dict[str, object] = {}
    if base is not None:
        update["base_url"] = base
    if keep_short:
        update["keep_short_articles"] = True
    fields = parse_template(template) if template is not None else list(config.extraction.template)
    update["template"] = fields
    return config.extraction.model_copy(update=update), fields


@click.command()
@click.version_option(version=__version__)
@click.argument("source", type=click.File("rb"), default="-", required=False)
@click.option("--check", "-c", "mode", flag_value="check", help="Only check if the document is readerable")
@click.option("--html", "-H", "mode", flag_value="html", default=True, help="Print the article HTML (default)")
@click.option("--meta", "-M", "mode", flag_value="meta", help="Print the article metadata")
@click.option("--base", "-u", default=None, help="Base URL for relative links")
@click.option(
    "--template",
    "-T",
    envvar="QUARRYREAD_TEMPLATE",
    default=None,
    help="Comma-separated fields: title, body, byline, excerpt, sitename, url",
)
@click.option("--keep-short", is_flag=True, help="Return the longest article found even if it is short")
@click.option("--encoding", "-E", default=None, help="Character encoding of the input")
@click.option("--parser", "features", default=None, help="bs4 tree builder (lxml, html.parser, html5lib)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file path",
)
@click.option("--verbose", "-v", count=True, help="Increase logging verbosity")
def cli(
    source: BinaryIO,
    mode: str,
    base: Optional[str],
    template: Optional[str],
    keep_short: bool,
    encoding: Optional[str],
    features: Optional[str],
    config_path: Optional[Path],
    verbose: int,
) -> None:
    """Extract the readable article from an HTML document.

    SOURCE is a local HTML file; standard input is read when it is omitted.
    """
    try:
        config = load_config(config_path)
        options, fields = build_options(config, base, template, keep_short)
    except (ValueError, OSError, yaml.YAMLError) as e:
        raise click.UsageError(str(e)) from e

    log_config = config.logging.model_copy(update={"log_level": _log_level(verbose, config.logging.log_level)})
    configure_logging(log_config)

    markup = source.read()
    try:
        doc = parse_html(
            markup,
            features or config.parser.features,
            encoding or config.parser.from_encoding,
        )
    except FeatureNotFound as e:
        raise click.UsageError(f"unknown parser: {e}") from e
    except LookupError as e:
        raise click.UsageError(f"unknown encoding: {e}") from e

    readerable = is_probably_readerable(doc)
    if mode == "check":
        sys.exit(EXIT_OK if readerable else EXIT_NOT_FOUND)

    try:
        result = parse_document(doc, options)
    except DocumentStructureError as e:
        click.echo(f"quarryread: {e}", err=True)
        sys.exit(EXIT_USAGE)

    if result.content is None:
        click.echo("quarryread: no content could be extracted", err=True)
        sys.exit(EXIT_NOT_FOUND)

    if mode == "meta":
        click.echo(format_metadata(result.metadata, readerable))
        return

    attach_metadata(result.content, result.metadata, fields, options.base_url)
    click.echo(result.content.decode())


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
