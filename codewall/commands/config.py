import click
import json

from ..config import get_config_path, load_config, redact


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSON")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    The GitHub token is masked. Use --path to see which config file is
    being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = redact(load_config())

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))
