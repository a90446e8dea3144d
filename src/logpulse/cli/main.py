"""Main CLI entry point"""

import click

from logpulse.__version__ import __version__
from logpulse.cli.run import run_command


class DefaultCommandGroup(click.Group):
    """Group that routes anything but --help/--version to the run command"""

    def parse_args(self, ctx, args):
        if ctx.resilient_parsing or (args and args[0] in ('--help', '-h', '--version')):
            return super().parse_args(ctx, args)
        if args and args[0] in self.commands:
            return super().parse_args(ctx, args)
        return super().parse_args(ctx, ['run'] + args)


@click.group(cls=DefaultCommandGroup)
@click.version_option(version=__version__, prog_name='logpulse')
def cli():
    """
    logpulse - Concurrent batch analysis of structured log directories.

    Options are passed to `logpulse run`, so `logpulse -d logs` and
    `logpulse run -d logs` are the same.

    \b
    For all options:
      logpulse run --help
    """


cli.add_command(run_command, name='run')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
