"""
Runtime configuration.

Every setting comes from a LIFEBALANCE_* environment variable with a
default; the oracle API key is read from GROQ_API_KEY (or LLM_API_KEY).
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

from .core.errors import StoreError
from .oracle import OpenAICompatRatingOracle, RatingOracle
from .oracle.openai_compat import DEFAULT_BASE_URL, DEFAULT_MODEL
from .store import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

DEFAULT_DATA_DIR = os.path.join(os.path.expanduser("~"), ".lifebalance")


class Settings(BaseModel):
    store: Literal["file", "s3", "memory"] = "file"
    data_dir: str = DEFAULT_DATA_DIR
    s3_bucket: Optional[str] = None
    s3_prefix: str = "lifebalance"
    s3_endpoint_url: Optional[str] = None
    s3_region: str = "us-east-1"

    oracle_base_url: str = DEFAULT_BASE_URL
    oracle_model: str = DEFAULT_MODEL
    oracle_api_key: Optional[str] = Field(default=None, repr=False)
    oracle_timeout: float = Field(default=10.0, gt=0)
    oracle_retries: int = Field(default=1, ge=0, le=5)

    metrics_enabled: bool = False
    metrics_port: int = 9108

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Unset variables keep their defaults; malformed values raise
        pydantic's ValidationError.
        """
        env = os.environ if environ is None else environ
        fields = {
            "store": "LIFEBALANCE_STORE",
            "data_dir": "LIFEBALANCE_DATA_DIR",
            "s3_bucket": "LIFEBALANCE_S3_BUCKET",
            "s3_prefix": "LIFEBALANCE_S3_PREFIX",
            "s3_endpoint_url": "LIFEBALANCE_S3_ENDPOINT_URL",
            "s3_region": "LIFEBALANCE_S3_REGION",
            "oracle_base_url": "LIFEBALANCE_ORACLE_BASE_URL",
            "oracle_model": "LIFEBALANCE_ORACLE_MODEL",
            "oracle_timeout": "LIFEBALANCE_ORACLE_TIMEOUT",
            "oracle_retries": "LIFEBALANCE_ORACLE_RETRIES",
            "metrics_enabled": "LIFEBALANCE_METRICS_ENABLED",
            "metrics_port": "LIFEBALANCE_METRICS_PORT",
        }
        values = {name: env[var] for name, var in fields.items() if env.get(var)}
        api_key = env.get("GROQ_API_KEY") or env.get("LLM_API_KEY")
        if api_key:
            values["oracle_api_key"] = api_key
        return cls.model_validate(values)


def build_store(settings: Settings) -> KeyValueStore:
    """
    Construct the persistence backend named by settings.store.

    Raises:
        StoreError: If the backend cannot be created
    """
    if settings.store == "memory":
        return MemoryKeyValueStore()
    if settings.store == "s3":
        if not settings.s3_bucket:
            raise StoreError("LIFEBALANCE_S3_BUCKET is required for the s3 store")
        from .store.s3_store import S3KeyValueStore

        return S3KeyValueStore(
            bucket=settings.s3_bucket,
            prefix=settings.s3_prefix,
            endpoint_url=settings.s3_endpoint_url,
            region=settings.s3_region,
        )
    return FileKeyValueStore(settings.data_dir)


def build_oracle(settings: Settings) -> RatingOracle:
    return OpenAICompatRatingOracle(
        api_key=settings.oracle_api_key,
        base_url=settings.oracle_base_url,
        model=settings.oracle_model,
        timeout=settings.oracle_timeout,
        max_retries=settings.oracle_retries,
    )
