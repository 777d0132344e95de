"""Base worker class for the jurisdiction pipeline workers."""

from abc import ABC, abstractmethod

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class BaseWorker(ABC):
    """Base class for all workers in the jurisdiction pipeline."""

    name = "worker"

    def __init__(self):
        self.running = False
        self.processed = 0
        self.failed = 0

    async def start(self):
        """Start the worker."""
        self.running = True
        logger.info("Worker started", worker=self.name)

    async def stop(self):
        """Stop the worker."""
        self.running = False
        logger.info("Worker stopped",
                    worker=self.name,
                    processed=self.processed,
                    failed=self.failed)

    async def handle(self, message: BaseModel) -> BaseModel:
        """Process a message and keep per-worker counters."""
        try:
            result = await self.process_message(message)
        except Exception:
            self.failed += 1
            raise
        self.processed += 1
        return result

    async def health_check(self) -> bool:
        return self.running

    @abstractmethod
    async def process_message(self, message: BaseModel) -> BaseModel:
        """Process a message. Must be implemented by subclasses."""
        pass
