"""Tests for the sync orchestrator."""

import asyncio

import pytest

from conftest import FakeYouTubeClient, InMemoryVideoStore, build_orchestrator, search_item, video_status
from media_sync.channel.schemas import Channel
from media_sync.core.exceptions import YouTubeAPIError


class TestSyncPass:
    """End-to-end passes against the test doubles."""

    @pytest.mark.asyncio
    async def test_stable_id_channel_with_one_eligible_video(self, store):
        client = FakeYouTubeClient(
            channel_videos={"UCabc": [search_item("v1")]}, statuses={"v1": video_status("v1")}
        )
        orchestrator = build_orchestrator([Channel(id="UCabc", name="Ch1")], client, store)

        assert await orchestrator.run_pass() == 1
        assert list(store.documents) == ["v1"]
        assert store.documents["v1"]["channel_id"] == "UCabc"

    @pytest.mark.asyncio
    async def test_unresolvable_handle_writes_nothing(self, store):
        client = FakeYouTubeClient(
            handles={"@x": YouTubeAPIError("boom", status_code=500)},
            channel_search={"@x": YouTubeAPIError("boom", status_code=500)},
        )
        orchestrator = build_orchestrator([Channel(handle="@x", name="Ch2")], client, store)

        assert await orchestrator.run_pass() == 0
        assert store.documents == {}
        assert store.upsert_calls == 0

    @pytest.mark.asyncio
    async def test_handle_channel_is_resolved_then_fetched(self, store):
        client = FakeYouTubeClient(
            handles={"@x": [{"id": "UCresolved"}]},
            channel_videos={"UCresolved": [search_item("v1")]},
            statuses={"v1": video_status("v1")},
        )
        orchestrator = build_orchestrator([Channel(handle="@x", name="Ch2")], client, store)

        assert await orchestrator.run_pass() == 1
        assert store.documents["v1"]["channel_id"] == "UCresolved"

    @pytest.mark.asyncio
    async def test_failed_channel_does_not_stop_the_pass(self, store, api_error):
        client = FakeYouTubeClient(
            channel_videos={"UCbad": api_error, "UCgood": [search_item("g1")]},
            statuses={"g1": video_status("g1")},
        )
        orchestrator = build_orchestrator(
            [
                Channel(handle="@nobody", name="Unresolvable"),
                Channel(id="UCbad", name="Broken"),
                Channel(id="UCgood", name="Good"),
            ],
            client,
            store,
        )

        result = await orchestrator.sync_all()

        assert result.total_merged == 1
        assert [o.status for o in result.channels] == ["unresolved", "fetch_failed", "synced"]
        assert result.channels_failed == 2
        assert "g1" in store.documents

    @pytest.mark.asyncio
    async def test_malformed_search_payload_is_fetch_failed(self, store):
        client = FakeYouTubeClient(
            channel_videos={"UCbad": [{"id": "not-an-object"}], "UCgood": [search_item("g1")]},
            statuses={"g1": video_status("g1")},
        )
        orchestrator = build_orchestrator(
            [Channel(id="UCbad", name="Broken"), Channel(id="UCgood", name="Good")], client, store
        )

        result = await orchestrator.sync_all()

        assert [o.status for o in result.channels] == ["fetch_failed", "synced"]
        assert list(store.documents) == ["g1"]

    @pytest.mark.asyncio
    async def test_failed_merge_skips_only_that_record(self):
        store = InMemoryVideoStore(fail_video_ids={"v2"})
        client = FakeYouTubeClient(
            channel_videos={"UCabc": [search_item(v) for v in ("v1", "v2", "v3")]},
            statuses={v: video_status(v) for v in ("v1", "v2", "v3")},
        )
        orchestrator = build_orchestrator([Channel(id="UCabc", name="Ch1")], client, store)

        result = await orchestrator.sync_all()

        assert result.total_merged == 2
        assert sorted(store.documents) == ["v1", "v3"]
        outcome = result.channels[0]
        assert (outcome.videos_fetched, outcome.videos_merged, outcome.videos_failed) == (3, 2, 1)

    @pytest.mark.asyncio
    async def test_ineligible_videos_are_not_merged(self, store, youtube):
        orchestrator = build_orchestrator([Channel(id="UCbbb", name="Ch B")], youtube, store)

        assert await orchestrator.run_pass() == 1
        assert list(store.documents) == ["b1"]

    @pytest.mark.asyncio
    async def test_empty_registry(self, store):
        orchestrator = build_orchestrator([], FakeYouTubeClient(), store)
        result = await orchestrator.sync_all()

        assert result.total_merged == 0
        assert result.channels == []
        assert result.duration_seconds is not None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, store, youtube):
        orchestrator = build_orchestrator(
            [Channel(id="UCaaa", name="Ch A"), Channel(id="UCbbb", name="Ch B")], youtube, store
        )
        original = orchestrator.fetcher.fetch
        calls = 0

        async def flaky_fetch(channel_id, max_results=10):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("unexpected")
            return await original(channel_id, max_results)

        orchestrator.fetcher.fetch = flaky_fetch  # type: ignore[method-assign]

        result = await orchestrator.sync_all()

        assert [o.status for o in result.channels] == ["error", "synced"]
        assert "RuntimeError" in (result.channels[0].error or "")
        assert result.total_merged == 1

    @pytest.mark.asyncio
    async def test_count_includes_updates(self, store, youtube):
        orchestrator = build_orchestrator([Channel(id="UCaaa", name="Ch A")], youtube, store)

        assert await orchestrator.run_pass() == 2
        # Re-merging existing videos still counts
        assert await orchestrator.run_pass() == 2
        assert len(store.documents) == 2


class TestConcurrentPasses:
    """Overlapping passes converge on the same cache state."""

    @pytest.mark.asyncio
    async def test_overlapping_passes_match_sequential(self, youtube):
        channels = [Channel(id="UCaaa", name="Ch A"), Channel(id="UCbbb", name="Ch B")]

        sequential = InMemoryVideoStore()
        await build_orchestrator(channels, youtube, sequential).run_pass()

        concurrent = InMemoryVideoStore()
        first = build_orchestrator(channels, youtube, concurrent)
        second = build_orchestrator(channels, youtube, concurrent)
        counts = await asyncio.gather(first.run_pass(), second.run_pass())

        assert counts == [3, 3]
        assert sorted(concurrent.documents) == sorted(sequential.documents) == ["a1", "a2", "b1"]
        for video_id, doc in sequential.documents.items():
            other = concurrent.documents[video_id]
            assert {k: v for k, v in other.items() if k != "updated_at"} == {
                k: v for k, v in doc.items() if k != "updated_at"
            }
