"""superdriver command line interface."""
import json
import logging
import sys
from typing import Any, Dict, Tuple

import click
from colorama import Fore, Style, init

from superdriver import __version__
from superdriver.api.consumer import Consumer
from superdriver.api.register import Register
from superdriver.config import AppConfig, ConsumerConfig, RegistryConfig
from superdriver.errors import SuperdriverError
from superdriver.security.credentials import CredentialStore

# Initialize colorama
init(autoreset=True)


def print_header(title: str):
    """Print a section header."""
    click.echo(f"\n{Fore.CYAN}{'━' * 45}")
    click.echo(f"{Fore.CYAN}{title}")
    click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")


def parse_parameters(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Parse name=value pairs; values are read as JSON when possible."""
    parameters = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected name=value, got '{pair}'", param_hint="--param")
        name, raw = pair.split("=", 1)
        try:
            parameters[name] = json.loads(raw)
        except ValueError:
            parameters[name] = raw
    return parameters


def fail(error: Exception):
    click.echo(f"{Fore.RED}❌ {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """superdriver - invoke API operations through a semantic profile."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    ctx.obj = AppConfig.from_env()


@cli.command()
@click.argument("provider_url")
@click.argument("profile_id")
@click.argument("operation")
@click.option("--param", "-p", "params", multiple=True, help="Input parameter as name=value")
@click.option("--response", "-r", "response", multiple=True, help="Requested response property")
@click.option("--mapping-url", default=None, help="Explicit API specification URL")
@click.pass_obj
def perform(config: AppConfig, provider_url, profile_id, operation, params, response, mapping_url):
    """Perform OPERATION of PROFILE_ID on the provider at PROVIDER_URL."""
    consumer_config = ConsumerConfig(
        provider_url=provider_url,
        profile_id=profile_id,
        mapping_url=mapping_url or config.consumer.mapping_url,
        timeout=config.consumer.timeout,
        cache_dir=config.consumer.cache_dir,
    )
    consumer = Consumer(consumer_config, credentials=CredentialStore.from_env())

    try:
        result = consumer.perform(
            operation,
            parameters=parse_parameters(params),
            response=list(response) or None,
        )
    except SuperdriverError as e:
        fail(e)

    click.echo(json.dumps(result, indent=2, default=str))


@cli.command()
@click.argument("provider_url")
@click.argument("profile_id")
@click.option("--mapping-url", default=None, help="Explicit API specification URL")
@click.pass_obj
def operations(config: AppConfig, provider_url, profile_id, mapping_url):
    """List the profile-annotated operations of a provider."""
    consumer = Consumer(ConsumerConfig(
        provider_url=provider_url,
        profile_id=profile_id,
        mapping_url=mapping_url or config.consumer.mapping_url,
        timeout=config.consumer.timeout,
        cache_dir=config.consumer.cache_dir,
    ))

    try:
        affordances = consumer.list_affordances()
    except SuperdriverError as e:
        fail(e)

    print_header(f"Operations of {provider_url}")
    if not affordances:
        click.echo(f"{Fore.YELLOW}No annotated operations found")
        return

    for affordance in affordances:
        marker = Fore.GREEN if affordance["affordance"].startswith(f"{profile_id}#") else Fore.WHITE
        click.echo(f"{marker}{affordance['method']:6} {affordance['path']:40} {affordance['affordance']}")


@cli.command("find-services")
@click.argument("profile_id")
@click.option("--registry", default=None, help="Register URL")
@click.pass_obj
def find_services(config: AppConfig, profile_id, registry):
    """Find services supporting PROFILE_ID in the register."""
    registry_config = RegistryConfig(
        url=registry or config.registry.url,
        timeout=config.registry.timeout,
    )

    try:
        services = Register(registry_config).find_services(profile_id)
    except SuperdriverError as e:
        fail(e)

    print_header(f"Services for {profile_id}")
    for service in services:
        click.echo(f"{Fore.GREEN}✓ {service.get('serviceURL', service)}")


if __name__ == "__main__":
    cli()
