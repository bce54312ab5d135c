import asyncio
import random
import time
import statistics
import tracemalloc
from httpx import AsyncClient, ASGITransport
from main import app, app_state
from structures.indexed_heap import IndexedBinaryHeap


class PerformanceBenchmark:
    def __init__(self):
        self.latencies = []
        self.successful_requests = 0
        self.failed_requests = 0

    async def single_request(self, client: AsyncClient, method: str, url: str, **kwargs):
        start_time = time.perf_counter()

        try:
            response = await client.request(method, url, **kwargs)

            latency = (time.perf_counter() - start_time) * 1000
            self.latencies.append(latency)

            if response.status_code == 200:
                self.successful_requests += 1
            else:
                self.failed_requests += 1

        except Exception:
            self.failed_requests += 1
            latency = (time.perf_counter() - start_time) * 1000
            self.latencies.append(latency)

    def _report_metrics(self, test_name: str, duration: float, num_requests: int):
        if not self.latencies:
            print(f"\n  {test_name}: no requests sent")
            return {"throughput": 0.0, "avg_latency": 0.0, "p50": 0.0, "p95": 0.0, "p99": 0.0}

        throughput = num_requests / duration
        avg_latency = statistics.mean(self.latencies)
        p50 = statistics.median(self.latencies)
        p95 = statistics.quantiles(self.latencies, n=20)[18] if len(self.latencies) >= 20 else max(self.latencies)
        p99 = statistics.quantiles(self.latencies, n=100)[98] if len(self.latencies) >= 100 else max(self.latencies)

        print(f"\n{'=' * 60}")
        print(f"  {test_name}")
        print(f"{'=' * 60}")
        print(f"  Requests:    {num_requests}")
        print(f"  Duration:    {duration:.2f}s")
        print(f"  Throughput:  {throughput:,.0f} req/s")
        print(f"  OK:          {self.successful_requests}")
        print(f"  Failed:      {self.failed_requests}")
        print(f"  Avg Latency: {avg_latency:.2f}ms")
        print(f"  p50 Latency: {p50:.2f}ms")
        print(f"  p95 Latency: {p95:.2f}ms")
        print(f"  p99 Latency: {p99:.2f}ms")
        print(f"{'=' * 60}")

        return {
            "throughput": throughput,
            "avg_latency": avg_latency,
            "p50": p50,
            "p95": p95,
            "p99": p99,
        }

    def _reset(self):
        self.latencies.clear()
        self.successful_requests = 0
        self.failed_requests = 0

    def run_heap_test(self, num_values: int = 100000, duplicate_ratio: float = 0.5):
        """Drive the heap directly, without the HTTP layer."""
        value_range = max(1, int(num_values * duplicate_ratio))
        values = [random.randrange(value_range) for _ in range(num_values)]
        heap = IndexedBinaryHeap()

        start = time.perf_counter()
        for value in values:
            heap.insert(value)
        insert_time = time.perf_counter() - start

        distinct = heap.size()
        start = time.perf_counter()
        while not heap.is_empty():
            heap.remove_top()
        remove_time = time.perf_counter() - start

        print(f"\n{'=' * 60}")
        print(f"  Direct Heap Test ({num_values} inserts, {distinct} distinct)")
        print(f"{'=' * 60}")
        print(f"  Inserts:     {num_values / insert_time:,.0f} ops/s")
        print(f"  Removes:     {distinct / remove_time:,.0f} ops/s")
        print(f"{'=' * 60}")

        return {
            "insert_ops": num_values / insert_time,
            "remove_ops": distinct / remove_time,
        }

    async def run_insert_test(self, num_requests: int = 10000, concurrency: int = 100):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            start_time = time.time()

            semaphore = asyncio.Semaphore(concurrency)

            async def bounded_request(i):
                async with semaphore:
                    await self.single_request(
                        client, "POST", "/v1/queue/insert",
                        json={"queue_id": "benchmark_queue", "value": i % 1000}
                    )

            tasks = [bounded_request(i) for i in range(num_requests)]
            await asyncio.gather(*tasks)

            duration = time.time() - start_time

        return self._report_metrics("Insert Test", duration, num_requests)

    async def run_drain_test(self):
        self._reset()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/v1/queue/status?queue_id=benchmark_queue")
            depth = response.json().get("size", 0)

            start_time = time.time()
            for _ in range(depth):
                await self.single_request(
                    client, "POST", "/v1/queue/remove",
                    json={"queue_id": "benchmark_queue"}
                )
            duration = time.time() - start_time

        return self._report_metrics(f"Drain Test ({depth} removes)", duration, depth)

    async def run_all_benchmarks(self):
        print("\n" + "#" * 60)
        print("  COUNTING PRIORITY QUEUE: PERFORMANCE BENCHMARK")
        print("#" * 60)

        tracemalloc.start()

        results = {}
        results["heap"] = self.run_heap_test()
        results["insert"] = await self.run_insert_test(num_requests=10000, concurrency=100)
        results["drain"] = await self.run_drain_test()

        peak_memory = tracemalloc.get_traced_memory()[1]
        tracemalloc.stop()

        print(f"\n{'=' * 60}")
        print(f"  MEMORY")
        print(f"{'=' * 60}")
        print(f"  Peak Memory Usage: {peak_memory / 1024:.1f} KB ({peak_memory / (1024*1024):.2f} MB)")
        print(f"{'=' * 60}")

        print(f"\n{'#' * 60}")
        print(f"  SUMMARY")
        print(f"{'#' * 60}")
        print(f"  Heap inserts: {results['heap']['insert_ops']:,.0f} ops/s")
        print(f"  Heap removes: {results['heap']['remove_ops']:,.0f} ops/s")
        print(f"  HTTP insert p95: {results['insert']['p95']:.2f}ms")
        print(f"  HTTP remove p95: {results['drain']['p95']:.2f}ms")
        print(f"{'#' * 60}\n")

        return results


async def main():
    app_state["queues"] = {}

    benchmark = PerformanceBenchmark()
    await benchmark.run_all_benchmarks()


if __name__ == "__main__":
    asyncio.run(main())
