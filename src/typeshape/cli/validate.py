import json
import logging
import sys

import click

from typeshape.cli.utils import configure_logging, output_error, output_result
from typeshape.config import CoercionLevel, ExtraPolicy, ValidationPolicy
from typeshape.loaders import load_bundle_from_file, load_data_from_file
from typeshape.validator import ValidationResult, Validator

logger = logging.getLogger(__name__)


def format_validation_result(result: ValidationResult) -> str:
    if result.ok:
        return "\n".join(
            [
                click.style("✅ Validation passed!", fg="green", bold=True),
                json.dumps(result.value, indent=2, default=str),
            ]
        )

    output = [click.style("❌ Validation failed!", fg="red", bold=True)]
    output.append(f"   Found {click.style(str(len(result.errors)), fg='yellow')} error(s)")
    for error in result.errors:
        location = ".".join(str(segment) for segment in error.path) or "<root>"
        output.append(
            f"  {click.style('✗', fg='red')} {click.style(location, fg='cyan')} "
            f"[{error.code}] {error.message}"
        )
    return "\n".join(output)


@click.command(name="validate")
@click.argument("bundle", type=click.Path(dir_okay=False))
@click.argument("data", type=click.Path(dir_okay=False))
@click.option("--preset", help="Start from a named policy preset (strict, api, ...)")
@click.option(
    "--coercion",
    type=click.Choice([level.value for level in CoercionLevel]),
    help="Coercion level for primitive values",
)
@click.option(
    "--extra",
    type=click.Choice([policy.value for policy in ExtraPolicy]),
    help="Handling of unknown object keys",
)
@click.option(
    "--union-errors",
    type=click.Choice(["last", "all"]),
    help="Report the last union member's errors or all of them",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def validate(
    bundle: str,
    data: str,
    preset: str | None,
    coercion: str | None,
    extra: str | None,
    union_errors: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Validate a YAML or JSON data file against a schema bundle.

    The bundle holds a ``root`` specification and the named ``schemas`` it
    references. Exits with status 1 when the data is invalid.

    \b
    Examples:
        typeshape validate user.yml alice.json
        typeshape validate user.yml alice.json --coercion safe --extra forbid
        typeshape validate user.yml alice.json --preset api --json-output
    """
    configure_logging(debug)

    try:
        schema_bundle = load_bundle_from_file(bundle)
        value = load_data_from_file(data)

        policy = ValidationPolicy.preset(preset) if preset else ValidationPolicy()
        overrides = {
            key: option
            for key, option in (
                ("coercion", coercion),
                ("extra", extra),
                ("union_errors", union_errors),
            )
            if option is not None
        }
        if overrides:
            policy = policy.merge(**overrides)
        logger.debug(f"Validating {data} against {bundle} with {policy!r}")

        result = Validator(registry=schema_bundle.registry, policy=policy).validate(
            schema_bundle.root, value
        )
    except Exception as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        if result.ok:
            output_result(result.value, json_output=True)
        else:
            click.echo(
                json.dumps(
                    {
                        "status": "invalid",
                        "errors": [error.model_dump(mode="json") for error in result.errors],
                    },
                    indent=2,
                )
            )
    else:
        click.echo(format_validation_result(result))

    if not result.ok:
        sys.exit(1)
