from services.scheduling import ManualScheduler


def test_manual_scheduler_runs_frames_once_per_tick():
    scheduler = ManualScheduler(frame_interval_ms=16)
    seen = []
    scheduler.request_frame(lambda: seen.append(scheduler.now_ms()))
    scheduler.advance(40)
    assert seen == [16]
    assert scheduler.now_ms() == 40


def test_manual_scheduler_last_step_lands_on_target():
    scheduler = ManualScheduler(frame_interval_ms=16)
    ticks = []

    def on_frame():
        ticks.append(scheduler.now_ms())
        scheduler.request_frame(on_frame)

    scheduler.request_frame(on_frame)
    scheduler.advance(50)
    assert ticks == [16, 32, 48, 50]


def test_manual_scheduler_timers_fire_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(200, lambda: fired.append("b"))
    scheduler.call_later(100, lambda: fired.append("a"))
    scheduler.advance(150)
    assert fired == ["a"]
    scheduler.advance(50)
    assert fired == ["a", "b"]


def test_cancelled_handles_never_run_and_cancel_is_idempotent():
    scheduler = ManualScheduler()
    fired = []
    frame = scheduler.request_frame(lambda: fired.append("frame"))
    timer = scheduler.call_later(10, lambda: fired.append("timer"))
    frame.cancel()
    frame.cancel()
    timer.cancel()
    assert scheduler.pending_frames == 0
    assert scheduler.pending_timers == 0
    scheduler.advance(100)
    assert fired == []
