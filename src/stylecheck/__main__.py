from stylecheck.cli.main import cli

cli()
