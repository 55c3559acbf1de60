"""Tests for the sequential batch runner."""

import asyncio
import os

import pytest

from mcp_images.errors import JobCancelledError, ProviderTimeoutError
from mcp_images.jobs.models import JobRecord, JobStatus
from mcp_images.jobs.runner import BatchRunner, call_with_budget
from mcp_images.prompting import STYLES
from mcp_images.providers.base import ProviderName
from mcp_images.providers.dalle import DalleProvider

from tests.fakes import PNG_BYTES, FakeProvider


def _runner(provider, store):
    return BatchRunner(lambda name: provider, store)


def _job(options, words):
    return JobRecord(total_items=len(words), options=options)


class TestBatchRunner:
    async def test_cat_dog_round_trip(self, store, options, fake_provider):
        words = ["cat", "dog"]
        job = _job(options, words)

        await _runner(fake_provider, store).run(job, words)

        assert [r.source_word for r in job.results] == ["cat", "dog"]
        for result in job.results:
            assert result.succeeded
            assert result.location.startswith("file://")
            assert (result.width, result.height) == (512, 768)
            assert result.description == f"cartoon image of {result.source_word}"
            path = result.location[len("file://"):]
            with open(path, "rb") as f:
                assert f.read() == PNG_BYTES + result.source_word.encode()
        assert job.status == JobStatus.COMPLETED
        assert job.completed_items == 2
        assert job.completed_at is not None
        assert job.current_item is None

    async def test_prompt_uses_background_style_and_word(self, store, options, fake_provider):
        job = _job(options, ["cat"])

        await _runner(fake_provider, store).run(job, ["cat"])

        (call,) = fake_provider.calls
        assert call["prompt"] == f"white background, {STYLES['cartoon']}, cat"
        assert (call["width"], call["height"], call["quality"]) == (512, 768, "standard")

    async def test_failure_does_not_abort_remaining_items(self, store, options):
        provider = FakeProvider(fail_words={"dog"})
        words = ["cat", "dog", "fish", "bird"]
        job = _job(options, words)

        await _runner(provider, store).run(job, words)

        assert [c["word"] for c in provider.calls] == words
        assert [r.succeeded for r in job.results] == [True, False, True, True]
        failed = job.results[1]
        assert failed.source_word == "dog"
        assert failed.location is None
        assert failed.reason_message == "HTTP 500 for dog"
        assert (failed.width, failed.height) == (0, 0)
        assert job.completed_items == len(job.results) == 4

    async def test_repeated_words_do_not_overwrite_each_other(self, store, options, fake_provider):
        words = ["cat", "cat"]
        job = _job(options, words)

        await _runner(fake_provider, store).run(job, words)

        locations = {r.location for r in job.results}
        assert len(locations) == 2
        assert len(os.listdir(store.base_dir)) == 2

    async def test_timeout_produces_failure_and_batch_continues(self, store, options):
        provider = FakeProvider(hang_words={"slow"}, timeout=0.05)
        words = ["slow", "fast"]
        job = _job(options, words)

        await _runner(provider, store).run(job, words)

        slow, fast = job.results
        assert not slow.succeeded
        assert "timed out after 0.05 seconds" in slow.reason_message
        assert fast.succeeded

    async def test_missing_credential_is_recorded_per_item(self, store, options):
        provider = DalleProvider(endpoint="https://example.invalid", api_key=None, timeout=1)
        words = ["cat", "dog"]
        job = _job(options, words)

        await _runner(provider, store).run(job, words)

        assert [r.reason_message for r in job.results] == ["Missing OPENAI_API_KEY"] * 2
        assert job.status == JobStatus.COMPLETED

    async def test_progress_is_monotonic_and_consistent(self, store, options):
        provider = FakeProvider(fail_words={"c"}, delay=0.01)
        words = ["a", "b", "c", "d", "e"]
        job = _job(options, words)
        snapshots = []

        task = asyncio.create_task(_runner(provider, store).run(job, words))
        while not task.done():
            snapshots.append((job.status, job.completed_items, len(job.results), job.current_item))
            await asyncio.sleep(0.002)
        await task
        snapshots.append((job.status, job.completed_items, len(job.results), job.current_item))

        order = [JobStatus.STARTED, JobStatus.GENERATING, JobStatus.COMPLETED]
        ranks = [order.index(s[0]) for s in snapshots]
        assert ranks == sorted(ranks)
        counts = [s[1] for s in snapshots]
        assert counts == sorted(counts)
        for status, completed, result_count, current in snapshots:
            assert completed == result_count
            assert (status == JobStatus.COMPLETED) == (completed == len(words))
            if current is not None:
                assert status == JobStatus.GENERATING

    async def test_cancel_records_remaining_words_as_failures(self, store, options):
        provider = FakeProvider(hang_words={"a"})
        words = ["a", "b", "c"]
        job = _job(options, words)
        cancel = asyncio.Event()

        task = asyncio.create_task(_runner(provider, store).run(job, words, cancel))
        await provider.started.wait()
        cancel.set()
        await task

        assert [r.reason_message for r in job.results] == ["Job cancelled"] * 3
        assert [c["word"] for c in provider.calls] == ["a"]
        assert job.status == JobStatus.COMPLETED
        assert job.completed_items == 3

    async def test_empty_word_list_completes_immediately(self, store, options, fake_provider):
        job = JobRecord(total_items=0, options=options)

        await _runner(fake_provider, store).run(job, [])

        assert job.status == JobStatus.COMPLETED
        assert job.results == []

    async def test_provider_is_resolved_from_options(self, store, options, fake_provider):
        requested = []

        def factory(name):
            requested.append(name)
            return fake_provider

        await BatchRunner(factory, store).run(_job(options, ["cat"]), ["cat"])

        assert requested == [ProviderName.DALLE3]


class TestCallWithBudget:
    async def test_returns_result_within_budget(self):
        async def work():
            return b"ok"

        assert await call_with_budget(work(), 1.0, "Fake") == b"ok"

    async def test_raises_timeout_when_budget_exceeded(self):
        with pytest.raises(ProviderTimeoutError, match="Fake request timed out after 0.01 seconds"):
            await call_with_budget(asyncio.sleep(1), 0.01, "Fake")

    async def test_raises_cancelled_when_token_set(self):
        cancel = asyncio.Event()
        cancel.set()
        with pytest.raises(JobCancelledError):
            await call_with_budget(asyncio.sleep(1), 1.0, "Fake", cancel)

    async def test_propagates_provider_errors(self):
        async def boom():
            raise ValueError("bad payload")

        with pytest.raises(ValueError, match="bad payload"):
            await call_with_budget(boom(), 1.0, "Fake")
