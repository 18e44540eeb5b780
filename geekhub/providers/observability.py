"""Circuit breaker and call metrics for catalog providers."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Awaitable, Callable, DefaultDict, TypeVar

from geekhub.providers.http import is_caller_error

logger = logging.getLogger("geekhub.providers")

ResultT = TypeVar("ResultT")


class CircuitOpenError(Exception):
    """Raised when a provider circuit is open and calls are temporarily blocked."""

    def __init__(self, provider: str, remaining: float) -> None:
        super().__init__(f"{provider} circuit open for {remaining:.2f}s")
        self.provider = provider
        self.remaining = remaining


@dataclass
class CircuitBreakerState:
    """Per-provider failure streak and cooldown window."""
    threshold: int = 3
    base_backoff_seconds: float = 15.0
    max_backoff_seconds: float = 300.0
    failure_streak: int = 0
    open_until: float = 0.0
    current_backoff: float = field(init=False)
    opened_count: int = 0

    def __post_init__(self) -> None:
        self.current_backoff = self.base_backoff_seconds

    def can_call(self) -> bool:
        return time.monotonic() >= self.open_until

    def remaining_cooldown(self) -> float:
        return max(self.open_until - time.monotonic(), 0.0)

    def record_success(self) -> None:
        self.failure_streak = 0
        self.open_until = 0.0
        self.current_backoff = self.base_backoff_seconds

    def record_failure(self) -> None:
        """Open the circuit once the streak reaches the threshold, doubling the next backoff."""
        self.failure_streak += 1
        if self.failure_streak < self.threshold:
            return
        self.open_until = time.monotonic() + self.current_backoff
        self.failure_streak = 0
        self.opened_count += 1
        self.current_backoff = min(self.current_backoff * 2, self.max_backoff_seconds)

    def snapshot(self) -> dict[str, Any]:
        return {
            "failure_streak": self.failure_streak,
            "open_until": self.open_until,
            "remaining_cooldown": self.remaining_cooldown(),
            "current_backoff": self.current_backoff,
            "opened_count": self.opened_count,
        }


@dataclass
class OperationMetrics:
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    rejected: int = 0
    skipped: int = 0
    last_latency_ms: float | None = None
    last_error: str | None = None


class ProviderMonitor:
    """Track provider calls and refuse work while a provider's circuit is open."""

    def __init__(
        self,
        *,
        circuit_threshold: int = 3,
        base_backoff_seconds: float = 15.0,
        max_backoff_seconds: float = 300.0,
    ) -> None:
        self._metrics: DefaultDict[str, DefaultDict[str, OperationMetrics]] = defaultdict(
            lambda: defaultdict(OperationMetrics)
        )
        self._circuits: DefaultDict[str, CircuitBreakerState] = defaultdict(
            lambda: CircuitBreakerState(
                threshold=circuit_threshold,
                base_backoff_seconds=base_backoff_seconds,
                max_backoff_seconds=max_backoff_seconds,
            )
        )
        self._lock = asyncio.Lock()

    def allow_call(self, provider: str) -> bool:
        return self._circuits[provider].can_call()

    async def track(
        self,
        provider: str,
        operation: str,
        func: Callable[[], Awaitable[ResultT]],
        *,
        context: dict[str, Any] | None = None,
    ) -> ResultT:
        """Run a provider call, recording latency and updating the circuit.

        Failures are re-raised unchanged after being counted. Only transport errors,
        5xx responses and unexpected exceptions count toward the circuit; a 4xx is
        counted as ``rejected``.
        """
        context = context or {}
        async with self._lock:
            circuit = self._circuits[provider]
            metrics = self._metrics[provider][operation]
            if not circuit.can_call():
                metrics.skipped += 1
                remaining = circuit.remaining_cooldown()
                _emit(
                    logging.WARNING,
                    event="provider_circuit_open",
                    provider=provider,
                    operation=operation,
                    context=context,
                    remaining_cooldown=round(remaining, 2),
                )
                raise CircuitOpenError(provider, remaining)
            metrics.started += 1

        start = time.monotonic()
        try:
            result = await func()
        except Exception as exc:
            latency_ms = (time.monotonic() - start) * 1000
            if is_caller_error(exc):
                # 4xx: leave the circuit and failure counters alone.
                async with self._lock:
                    metrics.rejected += 1
                    metrics.last_latency_ms = latency_ms
                _emit(
                    logging.INFO,
                    event="provider_rejected",
                    provider=provider,
                    operation=operation,
                    error=str(exc),
                    latency_ms=round(latency_ms, 2),
                    context=context,
                )
                raise
            async with self._lock:
                metrics.failed += 1
                metrics.last_latency_ms = latency_ms
                metrics.last_error = str(exc)
                circuit.record_failure()
                circuit_state = circuit.snapshot()
            _emit(
                logging.WARNING,
                event="provider_failure",
                provider=provider,
                operation=operation,
                error=str(exc),
                latency_ms=round(latency_ms, 2),
                context=context,
                circuit=circuit_state,
            )
            raise

        latency_ms = (time.monotonic() - start) * 1000
        async with self._lock:
            metrics.succeeded += 1
            metrics.last_latency_ms = latency_ms
            metrics.last_error = None
            circuit.record_success()
        _emit(
            logging.INFO,
            event="provider_success",
            provider=provider,
            operation=operation,
            latency_ms=round(latency_ms, 2),
            context=context,
        )
        return result

    async def snapshot(self) -> dict[str, Any]:
        """Return circuit state and per-operation counters for every provider seen."""
        async with self._lock:
            return {
                provider: {
                    "circuit": self._circuits[provider].snapshot(),
                    "operations": {name: asdict(metrics) for name, metrics in operations.items()},
                }
                for provider, operations in self._metrics.items()
            }


def _emit(level: int, **payload: Any) -> None:
    logger.log(level, json.dumps(payload, default=str))


def summarize_providers(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Condense a monitor snapshot into health telemetry.

    A provider is degraded while its circuit is open, after three or more failures of
    one operation, or when its most recent call of some operation failed.
    """
    issues: list[dict[str, Any]] = []
    providers: dict[str, Any] = {}
    for provider, payload in snapshot.items():
        circuit = payload.get("circuit", {})
        operations = payload.get("operations", {})
        remaining = float(circuit.get("remaining_cooldown") or 0.0)
        circuit_open = remaining > 0
        if circuit_open:
            issues.append(
                {"provider": provider, "reason": "circuit_open", "remaining_cooldown": round(remaining, 2)}
            )
        failure_total = 0
        degraded = circuit_open
        for operation, metrics in operations.items():
            failed = int(metrics.get("failed") or 0)
            failure_total += failed
            if metrics.get("last_error"):
                degraded = True
                issues.append(
                    {
                        "provider": provider,
                        "operation": operation,
                        "reason": "last_error",
                        "error": metrics["last_error"],
                    }
                )
            if failed >= 3:
                degraded = True
                issues.append(
                    {"provider": provider, "operation": operation, "reason": "repeated_failures", "failed": failed}
                )
        providers[provider] = {
            "state": "degraded" if degraded else "ok",
            "circuit_open": circuit_open,
            "circuit": circuit,
            "operations": operations,
            "failure_total": failure_total,
        }
    return {"providers": providers, "issues": issues}
