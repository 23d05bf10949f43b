"""
Token usage accounting reported by providers.

Every field is optional: an absent value means the provider did not report
it. DeepSeek reports cache hits as ``prompt_cache_hit_tokens`` /
``prompt_cache_miss_tokens``; OpenAI-style providers nest them under
``prompt_tokens_details.cached_tokens``.
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class PromptTokensDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cached_tokens: Optional[int] = None


class Usage(BaseModel):
    """Token usage for one exchange."""

    model_config = ConfigDict(extra="ignore")

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    prompt_tokens_details: Optional[PromptTokensDetails] = None
    prompt_cache_hit_tokens: Optional[int] = None
    prompt_cache_miss_tokens: Optional[int] = None

    def total(self) -> Optional[int]:
        """Reported total, or prompt + completion when both are known."""
        if self.total_tokens is not None:
            return self.total_tokens
        if self.prompt_tokens is not None and self.completion_tokens is not None:
            return self.prompt_tokens + self.completion_tokens
        return None

    def cached_tokens(self) -> Optional[int]:
        """Prompt tokens served from the provider's cache, if reported."""
        if self.prompt_cache_hit_tokens is not None:
            return self.prompt_cache_hit_tokens
        if self.prompt_tokens_details is not None:
            return self.prompt_tokens_details.cached_tokens
        return None

    def as_tokens(self) -> Dict[str, Optional[int]]:
        """Canonical ``prompt``/``completion``/``total`` mapping for logging."""
        return {"prompt": self.prompt_tokens, "completion": self.completion_tokens, "total": self.total()}


__all__ = ["Usage", "PromptTokensDetails"]
