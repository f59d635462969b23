"""Command line surface"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from convo_cleaner import cli as cli_module
from convo_cleaner.core.batch.views import BatchOutcome
from convo_cleaner.core.pipeline.views import ProbeOutcome, TargetOutcome
from convo_cleaner.core.target.views import Target


@asynccontextmanager
async def fake_provider(user_data_dir, headed):
	yield object()


def batch_outcome(*results) -> BatchOutcome:
	return BatchOutcome(attempted=len(results), succeeded=sum(r.ok for r in results), results=list(results))


class TestRunCommand:
	def test_requires_urls(self):
		result = CliRunner().invoke(cli_module.cli, ['run'])
		assert result.exit_code != 0
		assert 'at least one URL' in result.output

	def test_dry_run_by_default(self, tmp_path):
		outcome = batch_outcome(TargetOutcome(
			target=Target.from_url('https://chatgpt.com/c/abc'), ok=True, step='confirmActivate', reason_code='dry_run'
		))
		run = AsyncMock(return_value=outcome)
		with patch.object(cli_module, 'open_provider', fake_provider), \
				patch.object(cli_module.BatchOrchestrator, 'run', run):
			result = CliRunner().invoke(
				cli_module.cli, ['--user-data-dir', str(tmp_path), 'run', 'https://chatgpt.com/c/abc']
			)
		assert result.exit_code == 0, result.output
		assert 'abc  Dry run' in result.output
		targets, config = run.await_args.args
		assert targets == ['https://chatgpt.com/c/abc']
		assert config.dry_run is True

	def test_live_with_urls_file(self, tmp_path):
		urls = tmp_path / 'urls.txt'
		urls.write_text('# comment\nhttps://chatgpt.com/c/one\n\nhttps://chatgpt.com/c/two\n', encoding='utf-8')
		outcome = batch_outcome(
			TargetOutcome(target=Target.from_url('https://chatgpt.com/c/one'), ok=True, step='verify', reason_code='toast'),
			TargetOutcome(
				target=Target.from_url('https://chatgpt.com/c/two'), ok=False, step='locateDestructiveControl',
				reason_code='element_missing', attempt=2, detail='delete_missing'
			),
		)
		run = AsyncMock(return_value=outcome)
		with patch.object(cli_module, 'open_provider', fake_provider), \
				patch.object(cli_module.BatchOrchestrator, 'run', run):
			result = CliRunner().invoke(cli_module.cli, [
				'--user-data-dir', str(tmp_path), 'run', '--urls-file', str(urls), '--live', '--max-retries', '3'
			])
		assert result.exit_code == 1
		assert 'LIVE mode' in result.output
		assert 'Control not found (delete missing)' in result.output
		assert '1/2 succeeded' in result.output
		targets, config = run.await_args.args
		assert targets == ['https://chatgpt.com/c/one', 'https://chatgpt.com/c/two']
		assert config.dry_run is False
		assert config.max_retries == 3


class TestProbeCommand:
	def test_prints_flags(self, tmp_path):
		probe = AsyncMock(return_value=ProbeOutcome(header_found=True, destructive_control_found=True))
		with patch.object(cli_module, 'open_provider', fake_provider), \
				patch.object(cli_module.BatchOrchestrator, 'probe', probe):
			result = CliRunner().invoke(cli_module.cli, ['--user-data-dir', str(tmp_path), 'probe', 'https://chatgpt.com/c/abc'])
		assert result.exit_code == 0, result.output
		assert 'header_found: True' in result.output
		assert 'confirmation_found: False' in result.output
