import asyncio
import unittest

from uptime_probe.contracts.probe_outcome import ProbeOutcome
from uptime_probe.core.aggregator import Aggregator, RunAccumulator, aggregate
from uptime_probe.core.deadline import RunDeadline
from uptime_probe.core.errors import BodyReadError, TransportError


class TestRunAccumulator(unittest.TestCase):
    def test_average_of_successes(self):
        acc = RunAccumulator()
        for secs in (1.0, 2.0, 3.0):
            acc.add(ProbeOutcome.success(secs))
        self.assertEqual(acc.success_count, 3)
        self.assertAlmostEqual(acc.average(), 2.0)

    def test_failures_excluded(self):
        acc = RunAccumulator()
        acc.add(ProbeOutcome.success(1.0))
        acc.add(ProbeOutcome.failure(TransportError("refused")))
        acc.add(ProbeOutcome.failure(BodyReadError("reset"), 9.0, 200))
        acc.add(ProbeOutcome.success(3.0))
        self.assertEqual(acc.success_count, 2)
        self.assertEqual(acc.failure_count, 2)
        self.assertAlmostEqual(acc.total_seconds, 4.0)
        self.assertAlmostEqual(acc.average(), 2.0)

    def test_no_successes_yields_none(self):
        acc = RunAccumulator()
        self.assertIsNone(acc.average())
        acc.add(ProbeOutcome.failure(TransportError("refused")))
        self.assertIsNone(acc.average())


class TestAggregate(unittest.IsolatedAsyncioTestCase):
    async def test_statistics(self):
        deadline = RunDeadline(0.3)
        queue = asyncio.Queue(maxsize=10)

        async def produce():
            for i in range(1, 11):
                await queue.put(ProbeOutcome.success(float(i)))

        deadline.start()
        producer = asyncio.create_task(produce())
        avg = await aggregate(deadline, queue)
        await producer
        self.assertEqual(avg, 5.5)

    async def test_returns_at_deadline_without_outcomes(self):
        deadline = RunDeadline(0.2)
        loop = asyncio.get_running_loop()
        start = loop.time()
        deadline.start()
        avg = await asyncio.wait_for(aggregate(deadline, asyncio.Queue()), timeout=2)
        self.assertIsNone(avg)
        self.assertGreaterEqual(loop.time() - start, 0.19)

    async def test_only_failures_yields_none(self):
        deadline = RunDeadline(0.1)
        queue = asyncio.Queue()
        for _ in range(3):
            queue.put_nowait(ProbeOutcome.failure(TransportError("refused")))
        aggregator = Aggregator(deadline, queue)
        deadline.start()
        self.assertIsNone(await aggregator.run())
        self.assertEqual(aggregator.accumulator.failure_count, 3)

    async def test_outcomes_after_deadline_are_not_read(self):
        deadline = RunDeadline(0.1)
        queue = asyncio.Queue()
        queue.put_nowait(ProbeOutcome.success(2.0))
        aggregator = Aggregator(deadline, queue)
        deadline.start()
        avg = await aggregator.run()
        queue.put_nowait(ProbeOutcome.success(100.0))
        await asyncio.sleep(0.05)
        self.assertEqual(avg, 2.0)
        self.assertEqual(aggregator.accumulator.success_count, 1)
        self.assertEqual(queue.qsize(), 1)

    async def test_logs_summary(self):
        deadline = RunDeadline(0.05)
        queue = asyncio.Queue()
        queue.put_nowait(ProbeOutcome.success(1.0))
        deadline.start()
        with self.assertLogs("uptime_probe.core.aggregator", level="INFO") as captured:
            await aggregate(deadline, queue)
        self.assertIn("1 successful probes, 0 failed", captured.output[-1])


if __name__ == "__main__":
    unittest.main()
