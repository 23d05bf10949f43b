"""Typed, immutable generation options for a request.

Purpose
-------
``RequestOptions`` gathers the independently optional generation parameters
(sampling, penalties, limits, tools, response format, streaming flag). It is a
frozen Pydantic model: values are validated once, when the options value is
constructed, and a changed set of options is a new value
(:meth:`RequestOptions.with_options`).

Clamping
--------
Parameters with a natural range are clamped as they are set, so an
out-of-range document can never be assembled:

- ``temperature`` → [0.0, 2.0]
- ``top_p`` → [0.0, 1.0]
- ``frequency_penalty`` / ``presence_penalty`` → [-2.0, 2.0]

Other constraints (positive token limits, unknown option names, NaN values)
raise ``pydantic.ValidationError``.

Serialization
-------------
``to_wire`` drops every unset option. Providers differ in whether they accept
``null`` fields, so absent options are never sent.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEMPERATURE_RANGE = (0.0, 2.0)
TOP_P_RANGE = (0.0, 1.0)
PENALTY_RANGE = (-2.0, 2.0)


def _clamp(value: Optional[float], bounds: tuple[float, float]) -> Optional[float]:
    if value is None:
        return None
    low, high = bounds
    return min(max(value, low), high)


class ResponseFormat(BaseModel):
    """Response-format hint, serialized as ``{"type": ...}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text", "json_object", "json_schema"] = "text"
    json_schema: Optional[Dict[str, Any]] = None


class RequestOptions(BaseModel):
    """Optional generation parameters flattened into the request body."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    store: Optional[bool] = None
    reasoning_effort: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    frequency_penalty: Optional[float] = None
    logit_bias: Optional[Dict[str, float]] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = Field(default=None, ge=0, le=20)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    max_completion_tokens: Optional[int] = Field(default=None, gt=0)
    n: Optional[int] = Field(default=None, gt=0)
    modalities: Optional[List[str]] = None
    prediction: Optional[Dict[str, Any]] = None
    audio: Optional[Dict[str, Any]] = None
    presence_penalty: Optional[float] = None
    response_format: Optional[ResponseFormat] = None
    seed: Optional[int] = None
    service_tier: Optional[str] = None
    stop: Optional[Union[str, List[str]]] = None
    stream: Optional[bool] = None
    stream_options: Optional[Dict[str, Any]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = Field(default=None, gt=0)
    tools: Optional[List[Dict[str, Any]]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None
    user: Optional[str] = None

    @field_validator("temperature")
    @classmethod
    def _clamp_temperature(cls, v: Optional[float]) -> Optional[float]:
        return _clamp(v, TEMPERATURE_RANGE)

    @field_validator("top_p")
    @classmethod
    def _clamp_top_p(cls, v: Optional[float]) -> Optional[float]:
        return _clamp(v, TOP_P_RANGE)

    @field_validator("frequency_penalty", "presence_penalty")
    @classmethod
    def _clamp_penalty(cls, v: Optional[float]) -> Optional[float]:
        return _clamp(v, PENALTY_RANGE)

    @field_validator("response_format", mode="before")
    @classmethod
    def _coerce_response_format(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {"type": v}
        return v

    def with_options(self, **changes: Any) -> "RequestOptions":
        """Return a new validated value with ``changes`` applied.

        Passing ``None`` for a field unsets it.
        """
        data = self.model_dump(exclude_none=True)
        data.update(changes)
        return type(self).model_validate(data)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize set options only; unset options are omitted, never null."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = [
    "RequestOptions",
    "ResponseFormat",
    "TEMPERATURE_RANGE",
    "TOP_P_RANGE",
    "PENALTY_RANGE",
]
