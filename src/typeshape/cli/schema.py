import logging

import click

from typeshape.cli.utils import configure_logging, output_error, output_result
from typeshape.json_schema import (
    Provider,
    SchemaGenerator,
    check_schema,
    enforce_structured_output,
    flatten_schema,
    optimize_for_llm,
    resolve_references,
)
from typeshape.loaders import load_bundle_from_file

logger = logging.getLogger(__name__)


@click.command(name="schema")
@click.argument("bundle", type=click.Path(dir_okay=False))
@click.option("--title", help="Document title")
@click.option("--resolve", is_flag=True, help="Inline $ref pointers")
@click.option("--flatten", is_flag=True, help="Inline aggressively, including simple types")
@click.option(
    "--max-depth",
    type=click.IntRange(min=0),
    help="Maximum inlining depth (default: 10 with --resolve, 5 with --flatten)",
)
@click.option(
    "--provider",
    type=click.Choice([provider.value for provider in Provider]),
    help="Apply an LLM provider's structured-output rules",
)
@click.option("--remove-descriptions", is_flag=True, help="Strip description keywords")
@click.option("--check", is_flag=True, help="Check the result against the Draft 7 meta-schema")
@click.option("--json-output", is_flag=True, help="Wrap the document in a JSON status envelope")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def schema(
    bundle: str,
    title: str | None,
    resolve: bool,
    flatten: bool,
    max_depth: int | None,
    provider: str | None,
    remove_descriptions: bool,
    check: bool,
    json_output: bool,
    debug: bool,
) -> None:
    """Generate the JSON Schema document for a schema bundle.

    \b
    Examples:
        typeshape schema user.yml
        typeshape schema user.yml --resolve --max-depth 3
        typeshape schema user.yml --flatten --provider openai --check
    """
    configure_logging(debug)

    try:
        schema_bundle = load_bundle_from_file(bundle)
        doc = SchemaGenerator(schema_bundle.registry).generate(schema_bundle.root, title=title)

        if flatten:
            doc = flatten_schema(doc, max_depth=5 if max_depth is None else max_depth)
        elif resolve:
            doc = resolve_references(doc, max_depth=10 if max_depth is None else max_depth)

        if provider:
            doc = enforce_structured_output(doc, provider)
        if remove_descriptions:
            doc = optimize_for_llm(doc, remove_descriptions=True, simplify_unions=False)
        if check:
            check_schema(doc)
            logger.debug("Generated document passed the Draft 7 meta-schema check")

        output_result(doc, json_output)
    except Exception as e:
        output_error(e, json_output, debug)
