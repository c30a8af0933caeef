# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import unittest
from typing import List, Optional

from nutripal.genai import CredentialPool, NoCredentialsConfigured, RotationExecutor


class UpstreamError(Exception):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class FakeClient:
    def __init__(self, credential: str) -> None:
        self.credential = credential


class RecordingFactory:
    def __init__(self) -> None:
        self.built: List[FakeClient] = []

    def __call__(self, credential: str) -> FakeClient:
        client = FakeClient(credential)
        self.built.append(client)
        return client

    @property
    def credentials(self) -> List[str]:
        return [c.credential for c in self.built]


def _executor(keys: List[str]) -> tuple[RotationExecutor[FakeClient], RecordingFactory]:
    factory = RecordingFactory()
    return RotationExecutor(CredentialPool(keys), factory), factory


class TestRotationExecutor(unittest.IsolatedAsyncioTestCase):
    async def test_first_attempt_success_builds_one_client(self) -> None:
        executor, factory = _executor(["A", "B", "C"])

        async def work(client: FakeClient) -> str:
            return f"ok:{client.credential}"

        result = await executor.run(work)
        self.assertEqual(result, "ok:A")
        self.assertEqual(factory.credentials, ["A"])

    async def test_rotates_on_quota_until_success(self) -> None:
        executor, factory = _executor(["A", "B", "C"])
        seen: List[str] = []

        async def work(client: FakeClient) -> int:
            seen.append(client.credential)
            if client.credential in {"A", "B"}:
                raise UpstreamError("429: quota exceeded")
            return 42

        result = await executor.run(work)
        self.assertEqual(result, 42)
        self.assertEqual(seen, ["A", "B", "C"])
        self.assertEqual(factory.credentials, ["A", "B", "C"])

    async def test_success_after_k_retryable_failures(self) -> None:
        keys = ["k0", "k1", "k2", "k3", "k4"]
        for k in range(len(keys)):
            with self.subTest(k=k):
                executor, factory = _executor(keys)
                seen: List[str] = []

                async def work(client: FakeClient, k: int = k) -> str:
                    seen.append(client.credential)
                    if len(seen) <= k:
                        raise UpstreamError("Too Many Requests", status=429)
                    return f"result-{len(seen)}"

                result = await executor.run(work)
                self.assertEqual(seen, keys[: k + 1])
                self.assertEqual(result, f"result-{k + 1}")
                self.assertEqual(len(factory.built), k + 1)

    async def test_fatal_error_stops_rotation(self) -> None:
        executor, factory = _executor(["A", "B"])
        error = ValueError("invalid argument")

        async def work(client: FakeClient) -> None:
            raise error

        with self.assertRaises(ValueError) as ctx:
            await executor.run(work)
        self.assertIs(ctx.exception, error)
        self.assertEqual(str(ctx.exception), "invalid argument")
        self.assertEqual(factory.credentials, ["A"])

    async def test_fatal_error_after_rotation_stops_at_that_index(self) -> None:
        executor, factory = _executor(["A", "B", "C", "D"])

        async def work(client: FakeClient) -> None:
            if client.credential == "A":
                raise UpstreamError("rate limit exceeded")
            raise UpstreamError("permission denied", status=403)

        with self.assertRaises(UpstreamError) as ctx:
            await executor.run(work)
        self.assertEqual(ctx.exception.status, 403)
        self.assertEqual(factory.credentials, ["A", "B"])

    async def test_single_key_rate_limited_propagates_same_error(self) -> None:
        executor, factory = _executor(["A"])
        error = UpstreamError("rate limit exceeded")

        async def work(client: FakeClient) -> None:
            raise error

        with self.assertRaises(UpstreamError) as ctx:
            await executor.run(work)
        self.assertIs(ctx.exception, error)
        self.assertEqual(factory.credentials, ["A"])

    async def test_exhaustion_surfaces_last_error(self) -> None:
        executor, factory = _executor(["A", "B", "C"])
        raised: List[UpstreamError] = []

        async def work(client: FakeClient) -> None:
            err = UpstreamError(f"quota exhausted for {client.credential}", status=429)
            raised.append(err)
            raise err

        with self.assertRaises(UpstreamError) as ctx:
            await executor.run(work)
        self.assertEqual(len(raised), 3)
        self.assertIs(ctx.exception, raised[-1])
        self.assertEqual(str(ctx.exception), "quota exhausted for C")

    async def test_empty_pool_never_calls_work(self) -> None:
        executor, factory = _executor([])
        calls = 0

        async def work(client: FakeClient) -> None:
            nonlocal calls
            calls += 1

        with self.assertRaises(NoCredentialsConfigured):
            await executor.run(work)
        self.assertEqual(calls, 0)
        self.assertEqual(factory.built, [])

    async def test_cancellation_is_not_retried(self) -> None:
        executor, factory = _executor(["A", "B"])

        async def work(client: FakeClient) -> None:
            raise asyncio.CancelledError("quota check cancelled")

        with self.assertRaises(asyncio.CancelledError):
            await executor.run(work)
        self.assertEqual(factory.credentials, ["A"])

    async def test_each_run_restarts_from_first_key(self) -> None:
        executor, factory = _executor(["A", "B"])

        async def work(client: FakeClient) -> str:
            if client.credential == "A":
                raise UpstreamError("429")
            return client.credential

        self.assertEqual(await executor.run(work), "B")
        self.assertEqual(await executor.run(work), "B")
        self.assertEqual(factory.credentials, ["A", "B", "A", "B"])

    async def test_fresh_client_per_attempt(self) -> None:
        executor, factory = _executor(["A", "A"])
        clients: List[FakeClient] = []

        async def work(client: FakeClient) -> None:
            clients.append(client)
            raise UpstreamError("quota")

        with self.assertRaises(UpstreamError):
            await executor.run(work)
        self.assertEqual(len(clients), 2)
        self.assertIsNot(clients[0], clients[1])

    async def test_concurrent_runs_are_independent(self) -> None:
        executor, factory = _executor(["A", "B"])

        async def rotating(client: FakeClient) -> str:
            await asyncio.sleep(0)
            if client.credential == "A":
                raise UpstreamError("quota")
            return client.credential

        async def direct(client: FakeClient) -> str:
            await asyncio.sleep(0)
            return client.credential

        results = await asyncio.gather(executor.run(rotating), executor.run(direct))
        self.assertEqual(results, ["B", "A"])

    async def test_rotation_logs_do_not_leak_keys(self) -> None:
        secret = "AIzaSySECRETKEY0000000000000001"
        executor = RotationExecutor(CredentialPool([secret, "AIzaSySECRETKEY0000000000000002"]), FakeClient)

        async def work(client: FakeClient) -> str:
            if client.credential == secret:
                raise UpstreamError("quota")
            return "ok"

        with self.assertLogs("nutripal.genai.rotation", level="WARNING") as logs:
            self.assertEqual(await executor.run(work), "ok")
        joined = "\n".join(logs.output)
        self.assertIn("key #0", joined)
        self.assertNotIn(secret, joined)
        self.assertNotIn("AIza", joined)


if __name__ == "__main__":
    unittest.main()
