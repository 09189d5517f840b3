"""
Asynchronous link enrichment.

Exports:
  - EnrichmentStateMachine, ALLOWED_TRANSITIONS: Metadata status guard
  - LinkEnricher, EnrichmentTask: One enrichment pass
  - EnrichmentWorker: Queue-backed background runner
"""

from linkdrop.core.enrichment.enricher import EnrichmentTask, LinkEnricher, fill_empty_fields
from linkdrop.core.enrichment.state_machine import ALLOWED_TRANSITIONS, EnrichmentStateMachine
from linkdrop.core.enrichment.worker import EnrichmentWorker

__all__ = [
    "ALLOWED_TRANSITIONS",
    "EnrichmentStateMachine",
    "EnrichmentTask",
    "EnrichmentWorker",
    "LinkEnricher",
    "fill_empty_fields",
]
