"""Command line entry point"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import click
from playwright.async_api import async_playwright

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.batch.service import BatchOrchestrator
from convo_cleaner.core.batch.views import BatchOutcome, format_reason_label
from convo_cleaner.core.pipeline.views import ProbeOutcome
from convo_cleaner.logging_config import setup_logging
from convo_cleaner.session.service import SessionProvider

logger = logging.getLogger(__name__)

DEFAULT_USER_DATA_DIR = Path.home() / '.convo-cleaner' / 'profile'


@asynccontextmanager
async def open_provider(user_data_dir: Path, headed: bool) -> AsyncIterator[SessionProvider]:
	"""Persistent browser context so an existing login is reused"""
	user_data_dir.mkdir(parents=True, exist_ok=True)
	async with async_playwright() as playwright:
		context = await playwright.chromium.launch_persistent_context(str(user_data_dir), headless=not headed)
		try:
			yield SessionProvider(context)
		finally:
			await context.close()


def read_urls(urls: tuple[str, ...], urls_file: Optional[str]) -> list[str]:
	collected = list(urls)
	if urls_file:
		for line in Path(urls_file).read_text(encoding='utf-8').splitlines():
			line = line.strip()
			if line and not line.startswith('#'):
				collected.append(line)
	return collected


def echo_batch(outcome: BatchOutcome) -> None:
	for result in outcome.results:
		status = 'OK' if result.ok else 'FAIL'
		name = result.target.id or result.target.canonical_url
		click.echo(f"{status:4} {name}  {format_reason_label(result)}  (step: {result.step}, attempt: {result.attempt})")
	summary = f"\n{outcome.succeeded}/{outcome.attempted} succeeded"
	if outcome.cancelled:
		summary += ' (cancelled)'
	click.echo(summary)


def echo_probe(outcome: ProbeOutcome) -> None:
	click.echo(f"header_found: {outcome.header_found}")
	click.echo(f"destructive_control_found: {outcome.destructive_control_found}")
	click.echo(f"confirmation_found: {outcome.confirmation_found}")
	if outcome.reason_code:
		click.echo(f"reason: {outcome.reason_code}")


@click.group()
@click.option('--log-level', default=None, help='Logging level (defaults to CONVO_CLEANER_LOG_LEVEL or INFO)')
@click.option('--user-data-dir', type=click.Path(file_okay=False), default=str(DEFAULT_USER_DATA_DIR), show_default=True)
@click.option('--headed', is_flag=True, help='Show the browser window')
@click.pass_context
def cli(ctx, log_level, user_data_dir, headed):
	"""Delete conversations through the web UI"""
	setup_logging(log_level)
	ctx.ensure_object(dict)
	ctx.obj['user_data_dir'] = Path(user_data_dir)
	ctx.obj['headed'] = headed


@cli.command()
@click.argument('urls', nargs=-1)
@click.option('--urls-file', type=click.Path(exists=True, dir_okay=False), help='File with one URL per line')
@click.option('--live', is_flag=True, help='Actually delete (default is a dry run)')
@click.option('--max-retries', type=int, default=None, help='Additional attempts per retryable step')
@click.option('--step-timeout-ms', type=int, default=None, help='Deadline for each lookup and verification')
@click.pass_context
def run(ctx, urls, urls_file, live, max_retries, step_timeout_ms):
	"""Run the delete flow for each URL in order"""
	targets = read_urls(urls, urls_file)
	if not targets:
		raise click.UsageError('Give at least one URL or --urls-file')
	config = CleanerConfig.from_env(
		dry_run=False if live else None,
		max_retries=max_retries,
		step_timeout_ms=step_timeout_ms
	)
	if not config.dry_run:
		click.echo('LIVE mode: conversations will be deleted')

	async def main() -> BatchOutcome:
		async with open_provider(ctx.obj['user_data_dir'], ctx.obj['headed']) as provider:
			return await BatchOrchestrator(provider).run(targets, config)

	outcome = asyncio.run(main())
	echo_batch(outcome)
	if outcome.failed:
		ctx.exit(1)


@cli.command()
@click.argument('url')
@click.option('--step-timeout-ms', type=int, default=None, help='Deadline for each lookup')
@click.pass_context
def probe(ctx, url, step_timeout_ms):
	"""Check that every control of the flow can be found, without deleting"""
	config = CleanerConfig.from_env(step_timeout_ms=step_timeout_ms)

	async def main() -> ProbeOutcome:
		async with open_provider(ctx.obj['user_data_dir'], ctx.obj['headed']) as provider:
			return await BatchOrchestrator(provider).probe(url, config)

	echo_probe(asyncio.run(main()))


if __name__ == '__main__':
	cli()
