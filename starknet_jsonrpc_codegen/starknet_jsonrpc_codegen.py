import json
import logging

import click

from .cli_utils import reconstruct_command_line, setup_logging
from .pipeline import CodegenError, CodeGeneratorConfig, PipelineGenerator, SpecVersion, get_profile

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--spec",
    "-s",
    required=True,
    envvar="SPEC",
    type=str,
    help=f"Specification version, one of: {', '.join(v.value for v in SpecVersion)}",
)
@click.option(
    "--specs-dir",
    default=None,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory with one sub-directory of OpenRPC documents per version",
)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--commit", default=None, envvar="CODEGEN_COMMIT_HASH", type=str, help="Generator source commit")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every pipeline stage to stderr")
def starknet_jsonrpc_codegen(spec, specs_dir, config, commit, verbose):
    setup_logging(verbose)

    if config is not None:
        with open(config) as f:
            try:
                config_dict = json.load(f)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"Invalid config file {config}: {e}") from e
        if not isinstance(config_dict, dict):
            raise click.ClickException(f"Invalid config file {config}: expected a JSON object")
        config = CodeGeneratorConfig.from_dict(config_dict)
    else:
        config = CodeGeneratorConfig()

    if commit:
        config.commit_hash = commit
    config.command_line = reconstruct_command_line(starknet_jsonrpc_codegen)

    try:
        profile = get_profile(spec)
        codegen = PipelineGenerator(profile, config, specs_dir)
        out = codegen.generate()
    except CodegenError as e:
        logger.debug("Code generation failed", exc_info=True)
        raise click.ClickException(str(e)) from e

    # Nothing is written unless the whole module was generated
    click.echo(out, nl=False)
