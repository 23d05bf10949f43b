"""DTO validation package for request options."""

from .request_options import RequestOptions, ResponseFormat

__all__ = ["RequestOptions", "ResponseFormat"]
