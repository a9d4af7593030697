"""
Tests de la pile de compensations et de la borne de temps des passerelles.
"""

import asyncio

import pytest

from orderflow.core.errors import GatewayError
from orderflow.services.saga import CompensationStack, bounded


class TestCompensationStack:
    @pytest.mark.asyncio
    async def test_unwinds_in_reverse_order(self) -> None:
        calls: list[str] = []

        def step(name: str):
            async def compensate() -> None:
                calls.append(name)

            return compensate

        saga = CompensationStack("test", order_id="o1")
        saga.push("reserve_a", step("release_a"))
        saga.push("reserve_b", step("release_b"))
        saga.push("charge", step("refund"))

        run, failed = await saga.unwind(RuntimeError("boom"))

        assert calls == ["refund", "release_b", "release_a"]
        assert (run, failed) == (3, 0)
        assert len(saga) == 0

    @pytest.mark.asyncio
    async def test_failing_compensation_does_not_stop_the_others(self) -> None:
        calls: list[str] = []

        async def ok() -> None:
            calls.append("ok")

        async def broken() -> None:
            raise GatewayError("inventory", "down")

        saga = CompensationStack("test")
        saga.push("first", ok)
        saga.push("second", broken)
        saga.push("third", ok)

        run, failed = await saga.unwind(RuntimeError("boom"))

        assert calls == ["ok", "ok"]
        assert (run, failed) == (2, 1)

    @pytest.mark.asyncio
    async def test_empty_stack(self) -> None:
        assert await CompensationStack("test").unwind(RuntimeError()) == (0, 0)


class TestBounded:
    @pytest.mark.asyncio
    async def test_returns_value_within_delay(self) -> None:
        async def fast() -> str:
            return "ok"

        assert await bounded("payment", fast(), timeout=1.0) == "ok"

    @pytest.mark.asyncio
    async def test_timeout_becomes_gateway_error(self) -> None:
        with pytest.raises(GatewayError) as exc_info:
            await bounded("payment", asyncio.sleep(1), timeout=0.01)
        assert exc_info.value.gateway == "payment"
