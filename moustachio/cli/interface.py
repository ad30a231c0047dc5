import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click_option_group import optgroup
import structlog

from moustachio import __version__ as app_version
from moustachio.config.settings import DataFormat, RenderConfig, DEFAULT_PARTIAL_EXTENSION, DEFAULT_RECURSION_LIMIT
from moustachio.config.loader import load_and_merge_configs, resolve_options, config_from_mapping
from moustachio.logging_setup import configure_logging
from moustachio.core.output import write_to_stdout, write_to_file
from moustachio.core.sources import STDIN_MARKER, load_data, read_text_source
from moustachio.core.templating import TemplateRenderer, compile_template
from moustachio.exceptions import MoustachioError, DataLoadError
from .console_output import print_node_tree

log = structlog.get_logger(__name__)

# cli parameter name -> RenderConfig attribute, for values given on the command line.
CLI_PARAM_TO_RENDERCONFIG_ATTR_MAP: Dict[str, str] = {
    "recursion_limit": "recursion_limit",
    "partial_dirs": "partial_dirs",
    "partial_extension": "partial_extension",
    "data_format_str": "data_format",
    "output_file": "output_file",
    "show_tree": "show_tree",
}

def _parse_user_vars(pairs) -> Dict[str, str]:
    user_vars: Dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--var")
        key, value = pair.split("=", 1)
        user_vars[key.strip()] = value
    return user_vars

def _build_effective_config(ctx: click.Context, template_source: str, cli_params: Dict[str, Any]) -> RenderConfig:
    raw_configs_from_toml_files = load_and_merge_configs()
    options = resolve_options(raw_configs_from_toml_files, cli_params.get("active_config_profile_name"))

    for param_name, attr in CLI_PARAM_TO_RENDERCONFIG_ATTR_MAP.items():
        if ctx.get_parameter_source(param_name) == click.core.ParameterSource.COMMANDLINE:
            value = cli_params[param_name]
            if attr == "partial_dirs":
                value = list(value)
            options[attr] = value

    if cli_params.get("user_vars"):
        merged_vars = dict(options.get("user_vars") or {})
        merged_vars.update(_parse_user_vars(cli_params["user_vars"]))
        options["user_vars"] = merged_vars

    if not options.get("partial_dirs"):
        # partials live next to the template unless configured otherwise.
        base_dir = Path.cwd() if template_source == STDIN_MARKER else Path(template_source).resolve().parent
        options["partial_dirs"] = [base_dir]

    return config_from_mapping(options)

def _run_render_flow(template_source: str, data_source: Optional[str], config: RenderConfig):
    log.info("render_orchestration_started", template=template_source, data=data_source)
    nodes = compile_template(read_text_source(template_source))
    if config.show_tree:
        print_node_tree(nodes, title=template_source)

    data = load_data(data_source, config.data_format)
    if config.user_vars:
        if not isinstance(data, dict):
            raise DataLoadError("--var can only be used when the data root is a mapping")
        data = {**data, **config.user_vars}

    output = TemplateRenderer(config=config).render(nodes, data)
    if config.output_file:
        write_to_file(config.output_file, output)
        click.echo(f"Info: Output written to: {config.output_file}", err=True)
    else:
        log.info("writing_final_output_to_stdout")
        write_to_stdout(output)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("template_source", metavar="TEMPLATE")
@optgroup.group("Data Options", help="Where the values for the template come from.")
@optgroup.option("-d", "--data", "data_source", default=None, metavar="FILE", help="JSON or TOML file holding the data root ('-' reads stdin).")
@optgroup.option("--data-format", "data_format_str", type=click.Choice([f.value for f in DataFormat]), default=None, help="Format of the data file. Default: guessed from the file suffix, json otherwise.")
@optgroup.option("--var", "user_vars", multiple=True, metavar="KEY=VALUE", help="Top-level values layered over the data root.")
@optgroup.group("Partial Options", help="How partial templates are found and expanded.")
@optgroup.option("-p", "--partials-dir", "partial_dirs", multiple=True, type=click.Path(file_okay=False, path_type=Path), help="Directory to search for partials (repeatable). Default: the template's directory.")
@optgroup.option("--partial-ext", "partial_extension", default=DEFAULT_PARTIAL_EXTENSION, help=f"Suffix appended to partial names. Default: {DEFAULT_PARTIAL_EXTENSION}.")
@optgroup.option("--recursion-limit", "recursion_limit", type=click.IntRange(min=1), default=DEFAULT_RECURSION_LIMIT, help=f"Maximum partial nesting depth. Default: {DEFAULT_RECURSION_LIMIT}.")
@optgroup.group("Output Options", help="Where the rendered text goes.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the output to. Default: stdout.")
@optgroup.option("--show-tree", "show_tree", is_flag=True, default=False, help="Print the compiled node tree to stderr.")
@optgroup.group("Application Behavior", help="Configuration profiles and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="moustachio", prog_name="moustachio", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, template_source: str, **cli_params: Any):
    """moustachio: render a Mustache TEMPLATE ('-' for stdin) with JSON or TOML data."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", template=template_source, params=cli_params)

    try:
        if template_source == STDIN_MARKER and cli_params.get("data_source") == STDIN_MARKER:
            raise click.UsageError("TEMPLATE and --data cannot both read from stdin.")
        final_config = _build_effective_config(ctx, template_source, cli_params)
        _run_render_flow(template_source, cli_params.get("data_source"), final_config)

    except MoustachioError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
