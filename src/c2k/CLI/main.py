# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for C2K.
"""
import json
import click
import yaml
from ..CONVERTERS.to_app_model import convert as convert_project
from ..MODELS.translation_config import TranslationConfig, DEFAULT_COMPOSE_FILE, DEFAULT_ENV_FILE
from ..UTILS.logging_config import setup_logging

@click.group()
@click.option('--file', '-f', default=DEFAULT_COMPOSE_FILE, help='Compose file path')
@click.option('--env-file', default=DEFAULT_ENV_FILE, help='Variables file, relative to the working directory')
@click.option('--log-level', default=None, help='Log level (default: WARNING or $C2K_LOG_LEVEL)')
@click.pass_context
def cli(ctx, file, env_file, log_level):
    """
    C2K - Docker Compose to Kubernetes model translator.

    Reads a compose file and prints the normalized application model.
    """
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj['config'] = TranslationConfig(compose_file=file, env_file=env_file)

@cli.command()
@click.option('--format', 'fmt', type=click.Choice(['json', 'yaml']), default='json')
@click.option('--out', '-o', default=None, type=click.Path(dir_okay=False, writable=True), help='Write to a file instead of stdout')
@click.pass_context
def convert(ctx, fmt, out):
    """Translate the compose file into the application model."""
    result = convert_project(ctx.obj['config'])
    if not result.ok:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)

    data = result.model.model_dump(mode='json')
    if fmt == 'yaml':
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2)

    if out:
        with open(out, 'w') as f:
            f.write(text)
        click.echo(f"Wrote {len(result.model.service_configs)} service(s) to {out}")
    else:
        click.echo(text)

@cli.command()
@click.pass_context
def services(ctx):
    """List services and their port bindings"""
    result = convert_project(ctx.obj['config'])
    if not result.ok:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)

    click.echo(f"{'SERVICE':15} {'IMAGE':30} PORTS")
    click.echo("-" * 60)
    for name, record in result.model.service_configs.items():
        ports = ", ".join(
            f"{p.host_port}:{p.container_port}" if p.host_port is not None else str(p.container_port)
            for p in record.ports
        )
        click.echo(f"{name:15} {record.image:30} {ports}")

def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
