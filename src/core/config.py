"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """Knobs for the claim-to-evidence pipeline."""

    acceptance_threshold: int = 20
    max_accepted: int = 3
    fallback_results: int = 3
    search_results: int = 10
    query_max_length: int = 100
    claim_max_chars: int = 2000
    parse_mode: str = "markdown"


@dataclass(frozen=True)
class DeliveryConfig:
    """Retry policy for outbound message delivery."""

    attempts: int = 3
    retry_delay_seconds: float = 1.0
    timeout_seconds: float = 10.0
