import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.types import CHAR, TypeDecorator

from ..database import Base


class GUID(TypeDecorator):
    """UUID kept in its 36-character text form (SQLite has no UUID type).

    Binds UUID objects or their string form; always loads uuid.UUID.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        return uuid.UUID(value) if value is not None else None


class EnrichmentJob(Base):
    """One bulk contact-enrichment request and, once known, its results.

    The webhook (matched on provider_enrichment_id, or on id via the webhook
    URL while the submission is in flight) and the status endpoint
    (matched on id) meet here.
    """

    __tablename__ = "enrichment_jobs"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    provider = Column(String, nullable=False, default="fullenrich")  # "fullenrich" | "mock"
    provider_enrichment_id = Column(String, nullable=True, unique=True, index=True)
    status = Column(String, nullable=False, default="pending")

    # Prospects as submitted, JSON list (camelCase)
    prospects_json = Column(Text, nullable=False)
    # {prospect key: EnrichedContact dict}; NULL until results arrive
    results_json = Column(Text, nullable=True, default=None)
    error = Column(Text, nullable=True, default=None)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
