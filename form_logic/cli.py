import json
import logging

import click

from .conditions import ConditionalLogic
from .config import ConfigManager
from .form_state import FormEvaluator, build_value_lookup
from .logging_config import setup_logging
from .sample_templates import HVAC_INSPECTION_TEMPLATE
from .schemas import ValidationError, load_template_file

logger = logging.getLogger(__name__)


def _load_values(path):
    """Read form values from a JSON object or a list of response rows."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Invalid values JSON in {path}: {e}")
    if isinstance(data, list):
        for index, row in enumerate(data):
            if not isinstance(row, dict):
                raise click.ClickException(f"Response row {index} in {path} must be a JSON object, got {type(row).__name__}")
        return build_value_lookup(data)
    if not isinstance(data, dict):
        raise click.ClickException('Values must be a JSON object or a list of {field, answer} rows')
    return data


def _load(path, strict, config):
    try:
        return load_template_file(path, strict=strict, config=config)
    except ValidationError as e:
        raise click.ClickException(str(e))


@click.group()
@click.option('--log-level', default=None, help='Override FORM_LOGIC_LOG_LEVEL for this run')
@click.pass_context
def cli(ctx, log_level):
    """Evaluate and validate conditional logic in form templates."""
    config = ConfigManager()
    if log_level:
        config.set('log_level', log_level)
    setup_logging(config)
    ctx.obj = config


@cli.command('evaluate')
@click.argument('template_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('values_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print field states as JSON')
@click.pass_obj
def evaluate_command(config, template_path, values_path, as_json):
    """Resolve visibility, enablement and requirement for every field."""
    template = _load(template_path, None, config)
    values = _load_values(values_path)
    evaluator = FormEvaluator(ConditionalLogic(), template)

    states = evaluator.evaluate(values)
    missing = evaluator.missing_required(values)
    invalid = evaluator.validation_errors(values)
    logger.info(f"Evaluated {len(states)} fields of template '{template.name}'")

    if as_json:
        click.echo(json.dumps({
            'template': template.name,
            'fields': [state.as_dict() for state in states.values()],
            'missing_required': missing,
            'validation_errors': invalid,
        }, indent=2))
        return

    for key, state in states.items():
        flags = [
            'visible' if state.visible else 'hidden',
            'enabled' if state.enabled else 'disabled',
            'required' if state.required else 'optional',
        ]
        click.echo(f"{key:<30} {' '.join(flags)}")
    if missing:
        click.echo(f"Missing required: {', '.join(missing)}")
    for key, messages in invalid.items():
        click.echo(f"Invalid {key}: {'; '.join(messages)}")


@cli.command('validate')
@click.argument('template_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--strict', is_flag=True, help='Reject unknown operators, actions and field types')
@click.pass_obj
def validate_command(config, template_path, strict):
    """Check a template's fields and conditions."""
    template = _load(template_path, True if strict else None, config)

    issues = 0
    for target in template.unknown_targets():
        click.echo(f"Condition targets unknown field '{target}'")
        issues += 1
    for name in template.unknown_references():
        click.echo(f"Rule reads unknown field '{name}'")
        issues += 1

    if issues:
        logger.warning(f"Template '{template.name}' has {issues} reference issues")
        raise click.ClickException(f"Found {issues} issues in template '{template.name}'")

    click.echo(f"Template '{template.name}' is valid "
               f"({len(template.fields)} fields, {len(template.conditions)} conditions)")


@cli.command('sample')
@click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True), help='Write to a file instead of stdout')
def sample_command(output):
    """Print the HVAC inspection sample template as JSON."""
    text = json.dumps(HVAC_INSPECTION_TEMPLATE, indent=2)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + '\n')
        logger.info(f"Wrote sample template to {output}")
        click.echo(f"Sample template written to {output}")
        return
    click.echo(text)


def main():
    cli()


if __name__ == '__main__':
    main()
