import time

from pickup_hub.metrics import (
    Counter,
    Gauge,
    Histogram,
    failed_order_counter,
    given_orders_gauge,
    pickpoint_counter,
    request_pickpoint_histogram,
)


def test_factory_names():
    assert pickpoint_counter().name == "pickpoint_grpc"
    assert failed_order_counter().name == "failed_orders_grpc"
    assert given_orders_gauge().name == "given_orders_grpc"
    assert request_pickpoint_histogram().name == "pickpoint_grpc_request"


def test_factory_help_texts():
    assert pickpoint_counter().help == "Number of requests handled"
    assert given_orders_gauge().help == "Number of given orders"


def test_counter_inc():
    counter = Counter("c")
    counter.inc()
    counter.inc()
    assert counter.value == 2


def test_counter_failed_inc_counts_only_errors():
    counter = Counter("c")
    counter.failed_inc(None)
    assert counter.value == 0
    counter.failed_inc(ValueError("x"))
    assert counter.value == 1


def test_gauge_add_and_dec():
    gauge = Gauge("g")
    gauge.add(5)
    gauge.dec()
    assert gauge.value == 4


def test_gauge_success_add_follows_error_argument():
    gauge = Gauge("g")
    gauge.success_add(None, 3)
    assert gauge.value == 0
    gauge.success_add(RuntimeError("x"), 3)
    assert gauge.value == 3


def test_gauge_success_dec_follows_error_argument():
    gauge = Gauge("g")
    gauge.success_dec(None)
    assert gauge.value == 0
    gauge.success_dec(RuntimeError("x"))
    assert gauge.value == -1


def test_histogram_observe_buckets():
    histogram = Histogram("h", buckets=(2.0, 1.0))
    histogram.observe(1.5)
    histogram.observe(0.5)
    assert histogram.count == 2
    assert histogram.sum == 2.0
    assert histogram.bucket_counts == {1.0: 1, 2.0: 2}


def test_histogram_observe_since_records_elapsed_time():
    histogram = Histogram("h")
    start = time.monotonic()
    histogram.observe_since(start)
    assert histogram.count == 1
    assert histogram.sum >= 0