import click
import json
import os
import logging
from dotenv import load_dotenv

from xml2schema.config.loader import (
    Config,
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_PATH,
    load_config,
)
from xml2schema.core.engine import StructureAnalyzer
from xml2schema.core.exceptions import ConfigError, InputError
from xml2schema.core.utils.fs import ensure_directory, create_file_if_missing
from xml2schema.models.relations import RelationKind

# Load .env file automatically
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

RELATION_HEADINGS = {
    RelationKind.ONE_TO_MANY: "One-to-many",
    RelationKind.MANY_TO_MANY: "Many-to-many",
    RelationKind.HIERARCHICAL: "Parent-child",
}


def _load_settings(config_path: str = None) -> Config:
    """Load the given config file, the project config, or built-in defaults."""
    if config_path:
        return load_config(config_path)
    if os.path.exists(DEFAULT_CONFIG_PATH):
        return load_config(DEFAULT_CONFIG_PATH)
    return Config()


@click.group()
@click.version_option(version="0.1.0", prog_name="xml2schema")
def cli():
    """xml2schema: Infer an object schema from XML documents."""
    pass

@cli.command()
def init():
    """Initialize a new xml2schema project."""
    click.echo("Initializing xml2schema project...")

    ensure_directory("sources")
    ensure_directory("outputs")

    if create_file_if_missing(DEFAULT_CONFIG_PATH, DEFAULT_CONFIG):
        click.echo(f"Created {DEFAULT_CONFIG_PATH}")
    else:
        click.echo(f"{DEFAULT_CONFIG_PATH} already exists.")

    click.echo("\nProject initialized successfully!")
    click.echo("\nNext steps:")
    click.echo("  1. Add XML documents to:  sources/")
    click.echo(f"  2. Adjust settings in:    {DEFAULT_CONFIG_PATH}")
    click.echo("  3. Run the analysis:      xml2schema analyze")

@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "-f", "output_format", type=click.Choice(["summary", "json"]),
              default="summary", help="Output format (default: summary)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write output to this file instead of stdout")
@click.option("--config", "-c", "config_path", type=click.Path(), help="Config file (default: xml2schema.yml if present)")
@click.option("--workers", "-w", type=click.IntRange(min=1), help="Documents to analyse in parallel")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def analyze(paths, output_format, output, config_path, workers, verbose):
    """Analyse XML files, or run the configured pipeline when no PATHS are given."""
    if verbose:
        logging.getLogger("xml2schema").setLevel(logging.DEBUG)

    try:
        if not paths:
            config = load_config(config_path or DEFAULT_CONFIG_PATH)
            if workers:
                config.analysis.workers = workers
            run_meta = StructureAnalyzer.from_config(config).run(config)
            click.echo(
                f"Analysed {run_meta.files_processed} document(s): "
                f"{run_meta.files_succeeded} succeeded, {run_meta.files_failed} failed"
            )
            return

        config = _load_settings(config_path)
        analyzer = StructureAnalyzer.from_config(config)
        results = analyzer.analyze_many(list(paths), workers=workers or config.analysis.workers)
    except (ConfigError, InputError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        text = json.dumps([result.to_output_dict() for result in results], indent=2)
    else:
        text = "\n\n".join(result.format_summary() for result in results)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        click.echo(f"Wrote {len(results)} result(s) to {output}")
    else:
        click.echo(text)

@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--kind", "-k", "kinds", multiple=True,
              type=click.Choice([kind.value for kind in RelationKind]),
              help="Only show this relationship kind (repeatable)")
def relations(path, kinds):
    """Print the relationships detected in one document."""
    selected = [RelationKind(kind) for kind in kinds] or list(RelationKind)
    try:
        config = _load_settings()
        config.analysis.relationships = selected
        result = StructureAnalyzer.from_config(config).analyze_file(path)
    except (ConfigError, InputError) as e:
        raise click.ClickException(str(e))

    found = {
        RelationKind.ONE_TO_MANY: result.one_to_many,
        RelationKind.MANY_TO_MANY: result.many_to_many,
        RelationKind.HIERARCHICAL: result.parent_child,
    }
    for kind in selected:
        click.echo(f"{RELATION_HEADINGS[kind]}:")
        if not found[kind]:
            click.echo("  (none)")
        for relation in found[kind]:
            click.echo(f"  {relation}")

@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def fields(path):
    """Print the field shapes of every composite element in one document."""
    try:
        config = _load_settings()
        result = StructureAnalyzer.from_config(config).analyze_file(path)
    except (ConfigError, InputError) as e:
        raise click.ClickException(str(e))

    for line in result.format_fields():
        click.echo(line)


if __name__ == "__main__":
    cli()
