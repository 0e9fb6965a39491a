#!/usr/bin/env python
import click
from werkzeug.serving import run_simple

from mirror_webhooks import create_app, logger
from mirror_webhooks.utils import make_signature


@click.group()
def cli():
    pass


@click.command()
@click.option("--host", default=None, help="Interface to listen on (default: $HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port to listen on (default: $PORT or 53981)")
@click.option("--config", default=None, help="Configuration name, like 'development'")
def serve(host, port, config):
    "Receives webhooks, one thread per connection"
    app = create_app(config=config)
    host = host or app.config["HOST"]
    port = port or app.config["PORT"]
    logger.info(f"Listening on {host}:{port}")
    run_simple(host, port, app, threaded=True)


@click.command()
@click.argument("secret")
@click.argument("payload", type=click.File("rb"))
def sign(secret, payload):
    "Prints the X-Hub-Signature-256 header for a payload file"
    click.echo(make_signature(secret, payload.read()))


cli.add_command(serve)
cli.add_command(sign)


if __name__ == "__main__":
    cli()
