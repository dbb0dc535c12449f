from .enrichment_job import EnrichmentJob

__all__ = ["EnrichmentJob"]
