import random
import threading

import pytest

from conftest import make_fleet
from fleet import AssignmentFailure, CarController, PassengerPickedUp, Person, Request


def test_concurrent_assign_never_overbooks():
    coordinator = make_fleet(4, 4, 4)
    callers = 50
    barrier = threading.Barrier(callers)
    results = []
    results_lock = threading.Lock()

    def call(index):
        rng = random.Random(index)
        origin = rng.randint(0, 9)
        destination = origin + 1
        barrier.wait()
        assignment = coordinator.assign(Person(f"P{index}", f"Rider {index}"), origin, destination)
        with results_lock:
            results.append(assignment)

    threads = [threading.Thread(target=call, args=(i,)) for i in range(callers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    accepted = [a for a in results if a.ok]
    refused = [a for a in results if a.reason == AssignmentFailure.NO_CAR_AVAILABLE]
    assert len(accepted) == 12
    assert len(refused) == callers - 12
    for status in coordinator.status():
        assert status.onboard + status.pending <= status.capacity
    assert len({a.request.request_id for a in results}) == callers


def test_enqueue_during_batches_loses_nothing():
    car = CarController("E1", capacity=1000)
    total = 400
    done = threading.Event()
    picked = []

    def producer():
        for i in range(total):
            car.enqueue(Request(f"REQ-{i}", Person(f"P{i}", "Rider"), i % 7, 8))
        done.set()

    def consumer():
        while not done.is_set():
            picked.extend(e.request_id for e in car.execute_batch() if isinstance(e, PassengerPickedUp))
        picked.extend(e.request_id for e in car.execute_batch() if isinstance(e, PassengerPickedUp))

    threads = [threading.Thread(target=producer), threading.Thread(target=consumer)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(picked) == sorted(f"REQ-{i}" for i in range(total))
    assert car.pending_count == 0


@pytest.mark.parametrize("seed", range(5))
def test_cars_batch_independently_while_assigning(seed):
    coordinator = make_fleet(3, 3)
    rng = random.Random(seed)
    stop = threading.Event()
    errors = []

    def dispatcher():
        while not stop.is_set():
            coordinator.dispatch_all()

    def caller(index):
        for step in range(30):
            origin = rng.randint(0, 9)
            destination = (origin + rng.randint(1, 9)) % 11
            coordinator.assign(Person(f"P{index}-{step}", "Rider"), origin, destination)
            for car in coordinator.cars:
                status = car.status()
                if status.onboard + status.pending > status.capacity:
                    errors.append(status)

    worker = threading.Thread(target=dispatcher)
    worker.start()
    callers = [threading.Thread(target=caller, args=(i,)) for i in range(4)]
    for thread in callers:
        thread.start()
    for thread in callers:
        thread.join()
    stop.set()
    worker.join()

    assert errors == []
