import sys

import click

from node_admission.admission.runtime_class_admission import RuntimeClassAdmission
from node_admission.defaults import apply_runtime_class_defaults, apply_runtime_class_list_defaults
from node_admission.models.app import AppContext
from node_admission.models.custom_errors import ManifestLoadError
from node_admission.models.runtime_class import RuntimeClass, RuntimeClassList
from node_admission.utils.fs import dump_data, read_manifest_from_file, save_data_to_file
from node_admission.utils.logger import (
    get_module_logger,
    set_global_log_level,
    verbosity_to_level,
)


@click.group(context_settings={"show_default": True})
def main():
    pass


def _setup(ctx, verbose: int, apply_defaults: bool = True):
    log_level = verbosity_to_level(verbose)
    ctx.obj = AppContext(verbose=log_level, apply_defaults=apply_defaults)

    # Set global log level so all modules use the correct verbosity
    set_global_log_level(log_level)
    return get_module_logger(__name__)


def _load(logger, path: str):
    try:
        return read_manifest_from_file(path)
    except ManifestLoadError as err:
        logger.error("%s", err)
        sys.exit(1)


@main.command(
    help='Default and validate a RuntimeClass manifest.'
)
@click.argument('manifest', type=click.Path(dir_okay=False))
@click.option('--old', help='Stored version of the object; validates MANIFEST as an update of it.',
    type=click.Path(dir_okay=False), default=None)
@click.option('--no-defaults', is_flag=True, help='Validate the manifest exactly as given.')
@click.option('-v', '--verbose', count=True, help='Increase verbosity of output.')
@click.pass_context
def validate(
    ctx,
    manifest: str,
    old: str = None,
    no_defaults: bool = False,
    verbose: int = 0
):
    logger = _setup(ctx, verbose, apply_defaults=not no_defaults)

    new_obj = _load(logger, manifest)
    old_obj = _load(logger, old) if old else None

    if isinstance(new_obj, RuntimeClassList):
        if old_obj is not None:
            logger.error("--old is only supported for a single %s", RuntimeClass.__name__)
            sys.exit(1)
        objects = list(new_obj.items)
    else:
        objects = [new_obj]

    if old_obj is not None and not isinstance(old_obj, RuntimeClass):
        logger.error("--old must contain a single %s", RuntimeClass.__name__)
        sys.exit(1)

    admission = RuntimeClassAdmission(apply_defaults=ctx.obj.apply_defaults)
    failed = False
    for obj in objects:
        errs = admission.admit(obj, old_obj)
        if errs:
            failed = True
            click.echo(f'{obj.kind} "{obj.metadata.name}" is invalid:')
            for err in errs:
                click.echo(f"  {err}")
        else:
            click.echo(f'{obj.kind} "{obj.metadata.name}" is valid')

    if failed:
        sys.exit(1)


@main.command(
    help='Apply defaults to a RuntimeClass manifest and print or save the result.'
)
@click.argument('manifest', type=click.Path(dir_okay=False))
@click.option('--output', '-o', help='File to save the defaulted manifest to.', default=None)
@click.option('--format', '-f', help='Format of the output.',
    type=click.Choice(['json', 'yaml'], case_sensitive=False),
    default='yaml'
)
@click.option('-v', '--verbose', count=True, help='Increase verbosity of output.')
@click.pass_context
def default(
    ctx,
    manifest: str,
    output: str = None,
    format: str = 'yaml',
    verbose: int = 0
):
    logger = _setup(ctx, verbose)

    obj = _load(logger, manifest)
    if isinstance(obj, RuntimeClassList):
        apply_runtime_class_list_defaults(obj)
    else:
        apply_runtime_class_defaults(obj)

    data = obj.to_manifest()
    format = format.lower()
    if output:
        save_data_to_file(data, output, format)
    else:
        click.echo(dump_data(data, format), nl=False)
