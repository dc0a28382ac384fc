from desktop_widget.provider import ACTION_UPDATE, ShiftTimerProvider, WidgetManager
from services.base import MemoryPreferenceStore

NOW = 1_760_000_000_000


class FakeScheduler:
    def __init__(self):
        self.armed = False
        self.calls = []

    def schedule(self):
        self.armed = True
        self.calls.append("schedule")

    def cancel(self):
        self.armed = False
        self.calls.append("cancel")


class FakeSurface:
    def __init__(self):
        self.views = []

    def apply(self, views):
        self.views.append(views)

    @property
    def last_text(self):
        return self.views[-1].text("time_remaining")


def _provider(store=None, clock=lambda: NOW):
    manager = WidgetManager()
    scheduler = FakeScheduler()
    opened = []
    provider = ShiftTimerProvider(
        manager,
        store or MemoryPreferenceStore(),
        scheduler,
        open_app=lambda: opened.append(True),
        clock=clock,
    )
    return provider, manager, scheduler, opened


def test_first_instance_arms_and_last_instance_disarms() -> None:
    _, manager, scheduler, _ = _provider()

    first = manager.add_instance(FakeSurface())
    second = manager.add_instance(FakeSurface())
    assert scheduler.calls == ["schedule"]

    manager.remove_instance(first)
    assert scheduler.armed

    manager.remove_instance(second)
    assert scheduler.calls == ["schedule", "cancel"]
    assert manager.instance_ids() == []


def test_removing_unknown_instance_is_ignored() -> None:
    _, manager, scheduler, _ = _provider()

    manager.remove_instance(42)

    assert scheduler.calls == []


def test_new_instance_is_rendered_immediately(running_store) -> None:
    _, manager, _, _ = _provider(running_store(NOW + 3_661_000))
    surface = FakeSurface()

    manager.add_instance(surface)

    assert surface.last_text == "01:01:01"
    assert surface.views[-1].text("status") == "Session running"


def test_update_action_refreshes_every_instance(running_store) -> None:
    clock = {"now": NOW}
    provider, manager, _, _ = _provider(running_store(NOW + 120_000),
                                        clock=lambda: clock["now"])
    surfaces = [FakeSurface(), FakeSurface()]
    for s in surfaces:
        manager.add_instance(s)

    clock["now"] = NOW + 60_000
    provider.on_receive(ACTION_UPDATE)

    assert [s.last_text for s in surfaces] == ["00:01:00", "00:01:00"]


def test_other_actions_are_ignored() -> None:
    provider, manager, _, _ = _provider()
    surface = FakeSurface()
    manager.add_instance(surface)

    provider.on_receive("something.else")

    assert len(surface.views) == 1


def test_on_update_only_touches_requested_instances() -> None:
    provider, manager, _, _ = _provider()
    a, b = FakeSurface(), FakeSurface()
    id_a = manager.add_instance(a)
    manager.add_instance(b)

    provider.on_update([id_a])

    assert len(a.views) == 2
    assert len(b.views) == 1


def test_every_text_opens_the_app() -> None:
    _, manager, _, opened = _provider()
    surface = FakeSurface()
    manager.add_instance(surface)

    views = surface.views[-1]
    for view_id in ("time_remaining", "end_time", "status"):
        views.on_click(view_id)()

    assert len(opened) == 3


def test_missing_store_keys_render_no_session() -> None:
    _, manager, _, _ = _provider(MemoryPreferenceStore())
    surface = FakeSurface()
    manager.add_instance(surface)

    assert surface.last_text == "--:--:--"
    assert surface.views[-1].text("end_time") == "No active session"


def test_current_texts_reflect_store(running_store) -> None:
    provider, _, _, _ = _provider(running_store(NOW - 1000))

    assert provider.current_texts() == {
        "time_remaining": "00:00:00",
        "end_time": "Session ended",
        "status": "Not running",
    }


def test_provider_without_scheduler() -> None:
    manager = WidgetManager()
    ShiftTimerProvider(manager, MemoryPreferenceStore(), scheduler=None, clock=lambda: NOW)

    instance_id = manager.add_instance(FakeSurface())
    manager.remove_instance(instance_id)
