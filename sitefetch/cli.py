# === FILE: sitefetch/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of sitefetch.

Crawls a site and writes its pages as a text report (stdout or file) or as a
JSON array (``--outfile`` ending in ``.json``).

Options:
  -o, --outfile PATH        Write the fetched site to a file (.json → JSON)
  --concurrency INT         Number of concurrent requests (default: 3)
  -m, --match PATTERN       Only record pages matching the glob (repeatable)
  --content-selector CSS    CSS selector of the page content
  --limit INT               Stop after this many pages
  --timeout SEC             Timeout of a single request
  --user-agent UA           User-Agent header
  --crawl-timeout SEC       Cancel the crawl after SEC seconds, keep what was found
  --disable-tokenizer       Log the page count instead of the GPT-4o token count
  -c, --config PATH         YAML/JSON file with default options
  --silent                  Do not print any logs
  --log-level LEVEL         Logging level (DEBUG, INFO, ...)
  --log-file PATH           Also write logs to this file
  -V, --version             Show the version

Example:
  sitefetch https://example.com/docs -m "/docs/**" -o site.json --limit 100
"""
import asyncio
import sys
from pathlib import Path

import click

from sitefetch import __version__
from sitefetch.config import build_config, load_config
from sitefetch.engine import fetch_site
from sitefetch.errors import ConfigError, CrawlCancelled, SiteFetchError
from sitefetch.logger import configure, logger
from sitefetch.report import serialize_pages, write_pages
from sitefetch.tokenizer import count_tokens

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def log_totals(pages, disable_tokenizer: bool):
    if not disable_tokenizer:
        try:
            tokens = count_tokens(pages.values())
        except (OSError, ValueError) as e:
            logger.warning('Token count unavailable: %s', e)
        else:
            logger.info('Total token count for %d pages: %s', len(pages), f'{tokens:,}')
            return
    logger.info('Total page count: %d pages', len(pages))


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-V', message='sitefetch, version %(version)s')
@click.argument('url', required=False)
@click.option(
    '--outfile', '-o', 'outfile',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Write the fetched site to a text file (JSON when it ends in .json)'
)
@click.option('--concurrency', type=int, default=None, help='Number of concurrent requests  [default: 3]')
@click.option('--match', '-m', 'match', multiple=True, help='Only fetch matched pages (glob, repeatable)')
@click.option('--content-selector', default=None, help='The CSS selector to find content')
@click.option('--limit', type=int, default=None, help='Limit the result to this amount of pages')
@click.option('--timeout', type=float, default=None, help='Timeout of a single request (seconds)')
@click.option('--user-agent', default=None, help='User-Agent header sent with every request')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Stop the whole crawl after this many seconds and keep the pages found'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON file with default options'
)
@click.option('--disable-tokenizer', is_flag=True, help='Do not count tokens, only log the page count')
@click.option('--silent', is_flag=True, help='Do not print any logs')
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
    help='Path of a log file (stderr only if not given)'
)
@click.pass_context
def cli(ctx, url, outfile, concurrency, match, content_selector, limit, timeout, user_agent,
        crawl_timeout, disable_tokenizer, config_path, silent, log_level, log_file):
    """Fetch a site and export its pages."""
    if not url:
        click.echo(ctx.get_help())
        return

    configure(level=log_level, log_file=log_file, silent=silent)

    try:
        base = load_config(config_path) if config_path else None
        cfg = build_config(
            base,
            concurrency=concurrency,
            match=list(match) or None,
            content_selector=content_selector,
            limit=limit,
            timeout=timeout,
            user_agent=user_agent,
        )
    except (ConfigError, FileNotFoundError) as e:
        print_error(f'Invalid configuration: {e}')

    try:
        pages = asyncio.run(fetch_site(url, cfg, cancel_after=crawl_timeout))
    except CrawlCancelled as e:
        logger.warning('Crawl cancelled, keeping %d pages', len(e.pages))
        pages = e.pages
    except ConfigError as e:
        print_error(f'Invalid configuration: {e}')
    except SiteFetchError as e:
        print_error(f'Fetch failed: {e}')

    if not pages:
        logger.warning('No pages found')
        return

    log_totals(pages, disable_tokenizer)

    if outfile:
        try:
            saved = write_pages(pages, outfile)
        except OSError as e:
            print_error(f'Could not write {outfile}: {e}')
        logger.info('Saved to %s', saved)
    else:
        click.echo(serialize_pages(pages, 'text'))


if __name__ == "__main__":
    cli()
