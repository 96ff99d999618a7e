#!/usr/bin/env python3
"""
Command-line entry point of SiteMirror.

Commands:
  mirror URL  Download URL and the same-site resources it links to
  config      Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (optional)
  --log-level LEVEL   Logging level (overrides -v/-d)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

mirror options:
  -a USER_AGENT       User-Agent string
  -u USERNAME         Basic auth user name
  -p PASSWORD         Basic auth password
  -r REFERER_URL      Referer for the first URL
  -h HOST1[,HOST2]    Extra allowed hosts
  -n NUMBER           Stop after NUMBER requests
  -N NUMBER           Stop after storing NUMBER files
  -s SECONDS          Random pause of up to SECONDS between requests
  -f                  Flat storage (one directory per host)
  -D DIRECTORY        Download directory
  -t / -z             Create a tar / zip archive
  -v / -d             Verbose / debugging output
  --json PATH         Save the JSON report
  --html PATH         Save the HTML report

Example:
  site-mirror mirror -v -s 10 -N 5 -n 10 http://www.example.com/
"""
import asyncio
import sys
from pathlib import Path

import click

from site_mirror import __version__
from site_mirror.aggregator import build_report
from site_mirror.config import load_config
from site_mirror.engine import start_mirror
from site_mirror.logger import init_logging, level_for
from site_mirror.report.html_report import render_html
from site_mirror.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _flag(value: bool):
    # unset flags must not override the config file
    return True if value else None


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(LOG_LEVELS),
    help='Logging level (default follows -v/-d)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMirror command group."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Could not load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['logging'] = {
        'level': log_level,
        'log_file': str(log_file) if log_file else None,
        'log_format': log_format,
    }
    init_logging(
        level=log_level or level_for(verbose=cfg.verbose, debug=cfg.debug),
        log_file=ctx.obj['logging']['log_file'],
        log_format=log_format,
    )


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('-a', '--user-agent', 'user_agent', default=None, help='User-Agent string')
@click.option('-u', '--username', 'username', default=None, help='Basic auth user name')
@click.option('-p', '--password', 'password', default=None, help='Basic auth password')
@click.option('-r', '--referer', 'referer', default=None, help='Referer for the first URL')
@click.option('-h', '--hosts', 'allowed_hosts', default=None, help='Extra allowed hosts, comma separated')
@click.option('-n', '--max-requests', 'max_requests', type=click.IntRange(min=1), default=None,
              help='Stop after this many requests')
@click.option('-N', '--max-stored', 'max_stored_files', type=click.IntRange(min=1), default=None,
              help='Stop after storing this many files')
@click.option('-s', '--sleep', 'delay', type=click.FloatRange(min=0), default=None,
              help='Random pause of up to SECONDS between requests')
@click.option('-f', '--flat', 'flat', is_flag=True, help='Store all files of a host in one directory')
@click.option('-D', '--directory', 'output_dir', default=None,
              type=click.Path(file_okay=False, path_type=Path), help='Download directory')
@click.option('-t', '--tar', 'tar', is_flag=True, help='Create a tar archive')
@click.option('-z', '--zip', 'zip_', is_flag=True, help='Create a zip archive')
@click.option('-v', '--verbose', 'verbose', is_flag=True, help='Verbose output')
@click.option('-d', '--debug', 'debug', is_flag=True, help='Debugging output (implies -v)')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path), help='Save the JSON report')
@click.option('--html', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path), help='Save the HTML report')
@click.pass_context
def mirror(ctx, url, user_agent, username, password, referer, allowed_hosts, max_requests,
           max_stored_files, delay, flat, output_dir, tar, zip_, verbose, debug, json_output, html_output):
    """Download URL and its same-site links."""
    try:
        cfg = ctx.obj['config'].with_overrides(
            user_agent=user_agent,
            username=username,
            password=password,
            referer=referer,
            allowed_hosts=allowed_hosts,
            max_requests=max_requests,
            max_stored_files=max_stored_files,
            delay=delay,
            flat=_flag(flat),
            output_dir=output_dir,
            tar=_flag(tar),
            zip=_flag(zip_),
            verbose=_flag(verbose or debug),
            debug=_flag(debug),
        )
    except Exception as e:
        print_error(f'Invalid option: {e}')

    log_opts = ctx.obj['logging']
    init_logging(
        level=log_opts['level'] or level_for(verbose=cfg.verbose, debug=cfg.debug),
        log_file=log_opts['log_file'],
        log_format=log_opts['log_format'],
    )

    if not Path(cfg.output_dir).is_dir():
        print_error(f'Could not change directory to {cfg.output_dir}')
    if cfg.verbose and output_dir is None:
        click.echo(f'Using directory {Path(cfg.output_dir).resolve()}')

    try:
        result = asyncio.run(start_mirror(cfg, url))
    except Exception as e:
        print_error(f'Mirroring failed: {e}')

    report = build_report(result)
    if cfg.verbose:
        click.echo(report.summary_text())

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Could not save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Could not save HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
