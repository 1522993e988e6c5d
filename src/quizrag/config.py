"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quizrag.embedding.encoder import DEFAULT_MODEL
from quizrag.errors import ConfigurationError
from quizrag.models import ChunkingConfig

DEFAULT_DB_PATH = Path("data/quizrag.db")


@dataclass(slots=True)
class AppConfig:
    db_path: Path = DEFAULT_DB_PATH
    model_name: str = DEFAULT_MODEL
    window_size: int = 4000
    overlap: int = 200
    batch_size: int = 50
    max_workers: int = 1

    def chunking_config(self) -> ChunkingConfig:
        """Return the validated chunking parameters."""
        return ChunkingConfig(window_size=self.window_size, overlap=self.overlap)

    def validate(self) -> None:
        """Fail fast on settings the pipeline cannot run with."""
        self.chunking_config()
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_workers <= 0:
            raise ConfigurationError(f"max_workers must be positive, got {self.max_workers}")

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path
