from wordplay.services.games.scheduler import RoundTimer


class ManualSpawn:
    """Collects worker loops instead of running them."""

    def __init__(self):
        self.workers = []

    def __call__(self, fn, *args):
        self.workers.append((fn, args))

    def run(self, index=-1):
        fn, args = self.workers[index]
        fn(*args)


def test_fire_only_reaches_armed_generation():
    ticks = []
    timer = RoundTimer(ticks.append)
    assert timer.fire() is False
    generation = timer.start()
    assert timer.fire() is True
    assert ticks == [generation]
    timer.cancel()
    assert timer.fire(generation) is False
    assert ticks == [generation]
    assert not timer.armed


def test_restart_supersedes_previous_generation():
    ticks = []
    timer = RoundTimer(ticks.append)
    first = timer.start()
    second = timer.start()
    assert second != first
    assert timer.fire(first) is False
    assert timer.fire(second) is True
    assert ticks == [second]


def test_worker_stops_once_cancelled():
    spawn = ManualSpawn()
    ticks = []
    sleeps = []

    def on_tick(generation):
        ticks.append(generation)
        if len(ticks) == 3:
            timer.cancel()

    timer = RoundTimer(on_tick, interval=1.0, spawn=spawn, sleep=sleeps.append, heartbeat=2)
    timer.start()
    spawn.run()
    assert len(ticks) == 3
    assert sleeps == [1.0, 1.0, 1.0]


def test_superseded_worker_never_ticks():
    spawn = ManualSpawn()
    ticks = []
    timer = RoundTimer(ticks.append, spawn=spawn, sleep=lambda _: None)
    timer.start()
    timer.start()
    timer.cancel()
    spawn.run(0)
    spawn.run(1)
    assert ticks == []


def test_cancel_during_sleep_drops_the_pending_tick():
    spawn = ManualSpawn()
    ticks = []

    def sleep(_):
        timer.cancel()

    timer = RoundTimer(ticks.append, spawn=spawn, sleep=sleep)
    timer.start()
    spawn.run()
    assert ticks == []
