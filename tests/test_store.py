from __future__ import annotations

from core.models import ClassificationConfig, ReputationState
from core.store import ClassificationStore


def test_replace_config_keeps_runtime_whitelist() -> None:
    store = ClassificationStore(whitelist=["safe.com"])
    config = ClassificationConfig.build(blacklist=["evil.com"])

    store.replace_config(config)

    assert store.read() == ReputationState(config=config, whitelist=("safe.com",))


def test_replace_does_not_mutate_previous_state() -> None:
    store = ClassificationStore(ClassificationConfig.build(blacklist=["old.com"]))
    before = store.read()

    store.replace_config(ClassificationConfig.build(blacklist=["new.com"]))

    assert before.config.blacklist == ("old.com",)
    assert store.read().config.blacklist == ("new.com",)


def test_whitelist_is_a_set_with_most_recent_first() -> None:
    store = ClassificationStore()

    store.add_to_whitelist("a.com")
    store.add_to_whitelist("b.com")
    store.add_to_whitelist("a.com")
    store.add_to_whitelist("a.com")

    assert store.read().whitelist == ("a.com", "b.com")


def test_initial_whitelist_is_deduplicated() -> None:
    store = ClassificationStore(whitelist=["a.com", "b.com", "a.com"])

    assert store.read().whitelist == ("a.com", "b.com")


def test_subscribers_see_each_published_state() -> None:
    store = ClassificationStore()
    seen: list[ReputationState] = []
    unsubscribe = store.subscribe(seen.append)

    store.replace_config(ClassificationConfig.build(blacklist=["evil.com"]))
    store.add_to_whitelist("safe.com")
    unsubscribe()
    store.add_to_whitelist("other.com")

    assert [state.config.blacklist for state in seen] == [("evil.com",), ("evil.com",)]
    assert seen[-1].whitelist == ("safe.com",)


def test_failing_subscriber_does_not_block_publish() -> None:
    store = ClassificationStore()

    def broken(state: ReputationState) -> None:
        raise RuntimeError("listener bug")

    seen: list[ReputationState] = []
    store.subscribe(broken)
    store.subscribe(seen.append)

    store.add_to_whitelist("safe.com")

    assert store.read().whitelist == ("safe.com",)
    assert len(seen) == 1


def test_whitelist_membership_set_tracks_each_state() -> None:
    store = ClassificationStore(whitelist=["a.com"])

    store.add_to_whitelist("b.com")
    store.replace_config(ClassificationConfig.build(blacklist=["b.com"]))

    state = store.read()
    assert state.whitelisted == frozenset({"a.com", "b.com"})
    assert state == ReputationState(config=state.config, whitelist=("b.com", "a.com"))
