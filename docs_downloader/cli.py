# === FILE: docs_downloader/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of docs_downloader.

Commands:
  download  Download one documentation site to markdown
  bulk      Download every site listed as "- Docs: [title](url)" in a file
  config    Show the parsed site configuration

Global options:
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --version, -v       Show the version

Example:
  docs-downloader download -u https://docs.example.com -d 2 --metadata
"""
import json
import sys
from pathlib import Path

import click

from docs_downloader import __version__
from docs_downloader.bulk import read_doc_urls
from docs_downloader.config import DownloadOptions, load_site_configs
from docs_downloader.engine import Engine
from docs_downloader.logger import init_logging
from docs_downloader.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _load_configs(config_path):
    try:
        return load_site_configs(config_path)
    except Exception as e:
        print_error(f'Could not load config file: {e}')


def _crawl_options(func):
    """Options shared by `download` and `bulk`."""
    options = [
        click.option('--output', '-o', 'output', default='./downloads', show_default=True,
                     type=click.Path(file_okay=False, path_type=Path), help='Output directory'),
        click.option('--depth', '-d', 'depth', default=3, show_default=True,
                     type=click.IntRange(min=0), help='Maximum crawl depth'),
        click.option('--force', is_flag=True, help='Re-download files that already exist'),
        click.option('--config', '-c', 'config_path', default=None,
                     type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help='Site-specific configuration (YAML or JSON)'),
        click.option('--metadata', 'metadata', is_flag=True,
                     help='Prefix files with source_url/downloaded_at front matter'),
        click.option('--report', 'report_path', default=None,
                     type=click.Path(dir_okay=False, path_type=Path),
                     help='Write a JSON summary of the run'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _save_report(reports, report_path):
    if report_path is None:
        return
    try:
        saved = render_json(reports, report_path)
        click.echo(f'JSON report: {saved}')
    except OSError as e:
        print_error(f'Could not save report: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='docs-downloader, version %(version)s')
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stdout when omitted)'
)
def cli(log_level, log_file):
    """Universal documentation downloader that converts docs sites to markdown."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)


@cli.command('download', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'url', required=True, help='Documentation website URL to download')
@_crawl_options
def download(url, output, depth, force, config_path, metadata, report_path):
    """Download documentation from a website."""
    site_configs = _load_configs(config_path)
    options = DownloadOptions(
        output_dir=output, max_depth=depth, force=force, include_metadata=metadata
    )
    click.echo(f'Starting documentation download: {url}')
    try:
        report = Engine(options, site_configs).start_download(url)
    except Exception as e:
        print_error(f'Error: {e}')

    _save_report([report], report_path)
    click.echo(
        f'Download completed: {report.files_written} written, '
        f'{report.files_skipped} skipped, {report.pages_failed} failed'
    )


@cli.command('bulk', context_settings=CONTEXT_SETTINGS)
@click.option('--file', '-f', 'url_file', default='env.md', show_default=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help='Markdown file listing "- Docs: [title](url)" entries')
@_crawl_options
def bulk(url_file, output, depth, force, config_path, metadata, report_path):
    """Download every documentation site listed in a file."""
    try:
        urls = read_doc_urls(url_file)
    except OSError as e:
        print_error(f'Error: {e}')
    if not urls:
        click.secho(f'No documentation URLs found in {url_file}', fg='yellow')
        return

    site_configs = _load_configs(config_path)
    options = DownloadOptions(
        output_dir=output, max_depth=depth, force=force, include_metadata=metadata
    )
    click.echo(f'Found {len(urls)} documentation sites to download')
    reports = Engine(options, site_configs).start_bulk(urls)

    _save_report(reports, report_path)
    click.echo(f'Bulk download completed: {len(reports)}/{len(urls)} sites')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option('--config', '-c', 'config_path', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Site-specific configuration (YAML or JSON)')
def show_config(config_path):
    """Show the parsed site configuration as JSON."""
    site_configs = _load_configs(config_path)
    data = {host: cfg.model_dump(by_alias=True) for host, cfg in site_configs.items()}
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
