from .cli.shell import cli

cli()
