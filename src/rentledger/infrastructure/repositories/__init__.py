"""Row <-> snapshot mapping for each entity table."""

from rentledger.infrastructure.repositories.payments import PaymentRepository
from rentledger.infrastructure.repositories.techniques import TechniqueRepository
from rentledger.infrastructure.repositories.workers import WorkerRepository

__all__ = ["PaymentRepository", "TechniqueRepository", "WorkerRepository"]
