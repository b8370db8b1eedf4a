"""
Validated request models for storage options, searches and filters.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import config


class FilterCriteria(BaseModel):
    """Metadata and/or text conditions. All present conditions must hold."""
    model_config = ConfigDict(extra="forbid")

    metadata: Optional[Dict[str, Any]] = None
    text: Optional[Union[str, List[str]]] = None

    def text_values(self) -> Optional[List[str]]:
        """Text condition as a list, or None when absent."""
        if self.text is None:
            return None
        if isinstance(self.text, str):
            return [self.text]
        return list(self.text)


class FilterOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    include: Optional[FilterCriteria] = None
    exclude: Optional[FilterCriteria] = None


class SimilaritySearchParams(BaseModel):
    query: str
    k: int = Field(default=4, ge=0)
    filter_options: Optional[FilterOptions] = None
    include_vectors: bool = False

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('query cannot be empty')
        return v


class StorageOptions(BaseModel):
    """Constructor options for VectorStorage. Unset values fall back to config."""
    model_config = ConfigDict(extra="forbid")

    max_size_in_mb: float = Field(default_factory=lambda: config.MAX_SIZE_IN_MB, ge=0)
    embedding_model_name: str = Field(default_factory=lambda: config.EMBED_MODEL_NAME)
    api_key: Optional[str] = Field(default_factory=lambda: config.OPENAI_API_KEY)
    api_url: str = Field(default_factory=lambda: config.OPENAI_API_URL)
    request_timeout: float = Field(default_factory=lambda: config.REQUEST_TIMEOUT_SEC, gt=0)
    embed_texts_fn: Optional[Callable[..., Any]] = None

    @field_validator('embedding_model_name')
    @classmethod
    def model_name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('embedding_model_name cannot be empty')
        return v

    @model_validator(mode="after")
    def blank_api_key_is_missing(self) -> "StorageOptions":
        if self.api_key is not None and not self.api_key.strip():
            self.api_key = None
        return self

    @property
    def has_embedding_path(self) -> bool:
        return self.embed_texts_fn is not None or self.api_key is not None
