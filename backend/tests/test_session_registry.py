import time

from app.interview.session import InterviewSessionRegistry


def test_session_registry_register_touch_inactive_cleanup():
    registry = InterviewSessionRegistry()
    controller = object()

    registry.register("s1", controller)
    entry = registry.get("s1")
    assert entry is not None
    assert entry.active is True
    assert registry.get_controller("s1") is controller
    assert registry.active_count() == 1

    before_touch = entry.updated_at
    time.sleep(0.01)
    registry.touch("s1")
    assert registry.get("s1").updated_at >= before_touch

    registry.mark_inactive("s1")
    assert registry.get("s1").active is False
    assert registry.active_count() == 0

    # ttl=0 clamps internally to >=30s; force old timestamp for deterministic cleanup
    registry._sessions["s1"].updated_at = time.time() - 3600  # test-only direct mutation
    removed = registry.cleanup_inactive(ttl_sec=0)
    assert removed == 1
    assert registry.get("s1") is None
    assert registry.get_controller("s1") is None


def test_active_and_recording_sessions_survive_cleanup():
    registry = InterviewSessionRegistry()
    registry.register("live", object())
    registry.register("busy", object())
    registry.claim_recording("busy")
    registry.mark_inactive("busy")
    # past the 60s TTL but inside the default idle TTL of four times that
    registry._sessions["live"].updated_at = time.time() - 180
    registry._sessions["busy"].updated_at = time.time() - 1_000_000

    assert registry.cleanup_inactive(ttl_sec=60) == 0
    assert registry.get("live") is not None
    assert registry.get("busy") is not None


def test_abandoned_active_session_swept_after_idle_ttl():
    registry = InterviewSessionRegistry()
    registry.register("abandoned", object())
    registry.register("recent", object())
    registry._sessions["abandoned"].updated_at = time.time() - 1_000_000

    assert registry.cleanup_inactive(ttl_sec=60) == 1
    assert registry.get("abandoned") is None
    assert registry.get("recent") is not None
    assert registry.active_count() == 1


def test_explicit_idle_ttl_is_respected():
    registry = InterviewSessionRegistry()
    registry.register("s1", object())
    registry._sessions["s1"].updated_at = time.time() - 600

    assert registry.cleanup_inactive(ttl_sec=60, idle_ttl_sec=3600) == 0
    assert registry.cleanup_inactive(ttl_sec=60, idle_ttl_sec=300) == 1


def test_get_returns_a_copy():
    registry = InterviewSessionRegistry()
    registry.register("s1", object())

    registry.get("s1").active = False
    assert registry.get("s1").active is True


def test_single_recording_claim_per_session():
    registry = InterviewSessionRegistry()
    registry.register("s1", object())

    assert registry.claim_recording("s1") is True
    assert registry.claim_recording("s1") is False
    registry.release_recording("s1")
    assert registry.claim_recording("s1") is True
    assert registry.claim_recording("missing") is False
