"""BDD step definitions for the flush lifecycle feature."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from metricshipper.adapters.transports.in_memory import InMemoryTransport
from metricshipper.core.collector import MetricCollector
from metricshipper.core.errors import MetricDeliveryError
from metricshipper.core.models import MetricDatum, Observation


def run_async(coro: Any) -> Any:
    """Run a coroutine to completion from a synchronous step."""
    return asyncio.run(coro)


@dataclass
class FlushScenarioContext:
    """Shared state between steps in a flush scenario."""

    transport: InMemoryTransport = field(default_factory=InMemoryTransport)
    collector: MetricCollector | None = None
    flush_error: Exception | None = None

    def entry(self, batch: int, name: str) -> MetricDatum:
        data = self.transport.batches[batch - 1]["MetricData"]
        [datum] = [d for d in data if d["MetricName"] == name]
        return datum


@pytest.fixture
def ctx() -> FlushScenarioContext:
    """Fresh scenario context for each test."""
    return FlushScenarioContext()


# === Given ===
@given("a recording transport")
def step_recording_transport(ctx: FlushScenarioContext) -> None:
    ctx.transport = InMemoryTransport()


@given("a transport that fails on its first call")
def step_failing_transport(ctx: FlushScenarioContext) -> None:
    ctx.transport = InMemoryTransport(fail_on=0)


@given(parsers.parse('a manual collector for namespace "{namespace}"'))
def step_manual_collector(ctx: FlushScenarioContext, namespace: str) -> None:
    ctx.collector = MetricCollector(
        service_namespace=namespace, transport=ctx.transport
    )


# === When ===
@when(
    parsers.parse(
        'I add "{name}" with dimension "{dim_name}" = "{dim_value}" and value {value:d}'
    )
)
def step_add_observation(
    ctx: FlushScenarioContext, name: str, dim_name: str, dim_value: str, value: int
) -> None:
    assert ctx.collector is not None
    ctx.collector.add_metrics(
        Observation(name=name, value=value, dimensions={dim_name: dim_value})
    )


@when(parsers.parse("I add {n:d} distinct metrics"))
def step_add_distinct(ctx: FlushScenarioContext, n: int) -> None:
    assert ctx.collector is not None
    ctx.collector.add_metrics(
        [Observation(name=f"metric{i:03d}", value=i) for i in range(n)]
    )


@when("the collector is flushed")
def step_flush(ctx: FlushScenarioContext) -> None:
    assert ctx.collector is not None
    try:
        run_async(ctx.collector.flush())
    except MetricDeliveryError as e:
        ctx.flush_error = e


@when("the collector is stopped twice")
def step_stop_twice(ctx: FlushScenarioContext) -> None:
    assert ctx.collector is not None
    run_async(ctx.collector.stop())
    run_async(ctx.collector.stop())


# === Then ===
@then(parsers.parse("the collector holds {n:d} records"))
def then_collector_holds(ctx: FlushScenarioContext, n: int) -> None:
    assert ctx.collector is not None
    assert len(ctx.collector.get_metrics()) == n


@then(parsers.parse('the record "{name}" has values "{values}"'))
def then_record_values(ctx: FlushScenarioContext, name: str, values: str) -> None:
    assert ctx.collector is not None
    [record] = [r for r in ctx.collector.get_metrics() if r.name == name]
    assert record.values == [float(v) for v in values.split(",")]


@then(parsers.parse("the transport received {n:d} batches"))
def then_batches_received(ctx: FlushScenarioContext, n: int) -> None:
    assert len(ctx.transport.batches) == n


@then(parsers.parse("the transport was called {n:d} times"))
def then_transport_calls(ctx: FlushScenarioContext, n: int) -> None:
    assert ctx.transport.calls == n


@then(parsers.parse('batch {index:d} has namespace "{namespace}" and {n:d} entries'))
def then_batch_shape(
    ctx: FlushScenarioContext, index: int, namespace: str, n: int
) -> None:
    batch = ctx.transport.batches[index - 1]
    assert batch["Namespace"] == namespace
    assert len(batch["MetricData"]) == n


@then(parsers.parse('batch {index:d} entry "{name}" has value {value:d}'))
def then_entry_value(
    ctx: FlushScenarioContext, index: int, name: str, value: int
) -> None:
    datum = ctx.entry(index, name)
    assert datum["Value"] == value
    assert "StatisticValues" not in datum


@then(
    parsers.parse(
        'batch {index:d} entry "{name}" has statistic values '
        "min {minimum:d}, max {maximum:d}, count {count:d}, sum {total:d}"
    )
)
def then_entry_statistics(
    ctx: FlushScenarioContext,
    index: int,
    name: str,
    minimum: int,
    maximum: int,
    count: int,
    total: int,
) -> None:
    datum = ctx.entry(index, name)
    assert "Value" not in datum
    assert datum["StatisticValues"] == {
        "Minimum": minimum,
        "Maximum": maximum,
        "SampleCount": count,
        "Sum": total,
    }


@then(parsers.parse('the batch sizes are "{sizes}"'))
def then_batch_sizes(ctx: FlushScenarioContext, sizes: str) -> None:
    expected = [int(s) for s in sizes.split(",")]
    assert [len(b["MetricData"]) for b in ctx.transport.batches] == expected
    names = [d["MetricName"] for b in ctx.transport.batches for d in b["MetricData"]]
    assert names == sorted(names)


@then("the flush succeeded")
def then_flush_succeeded(ctx: FlushScenarioContext) -> None:
    assert ctx.flush_error is None


@then("the flush fails with a delivery error")
def then_flush_failed(ctx: FlushScenarioContext) -> None:
    assert isinstance(ctx.flush_error, MetricDeliveryError)
    assert ctx.flush_error.logged is True
