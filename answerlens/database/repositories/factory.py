from answerlens.config.settings import Settings
from answerlens.database.repositories.analysis_repository import AnalysisRepository
from answerlens.database.repositories.base import BaseAnalysisRepository
from answerlens.database.repositories.memory_repository import InMemoryAnalysisRepository


class RepositoryFactory:
    """Creates the configured analysis record store."""

    BACKENDS: dict[str, type[BaseAnalysisRepository]] = {
        "postgres": AnalysisRepository,
        "memory": InMemoryAnalysisRepository,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalysisRepository:
        """The postgres backend expects init_pool() to have been called."""
        backend = settings.storage_backend.lower()
        repository_cls = cls.BACKENDS.get(backend)
        if repository_cls is None:
            raise ValueError(
                f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return repository_cls()
