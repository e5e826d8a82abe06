"""Runtime settings for the merkle-proofs command line tools."""

import logging

from pydantic import BaseModel, Field, field_validator

from merkle_proofs.core.batch import DEFAULT_CHUNK_SIZE

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    """Settings shared by CLI commands."""
    log_level: str = Field(
        "WARNING",
        description="Name of the logging level (DEBUG, INFO, WARNING, ERROR)."
    )
    chunk_size: int = Field(
        DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Bytes read per iteration when hashing files."
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure the level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level

    def configure_logging(self) -> None:
        logging.basicConfig(level=self.log_level, format=LOG_FORMAT)
        logging.getLogger().setLevel(self.log_level)
