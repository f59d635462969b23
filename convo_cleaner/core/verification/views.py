from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerificationReason(str, Enum):
	URL_CHANGED = 'url_changed'
	HEADER_MISSING = 'header_missing'
	TOAST = 'toast'


class VerificationSignal(BaseModel):
	model_config = ConfigDict(extra='forbid', frozen=True)

	reason: VerificationReason
	evidence: dict[str, Any] = Field(default_factory=dict)

	@classmethod
	def url_changed(cls, url: str) -> 'VerificationSignal':
		return cls(reason=VerificationReason.URL_CHANGED, evidence={'url': url})

	@classmethod
	def header_missing(cls, attempted: list[str]) -> 'VerificationSignal':
		return cls(reason=VerificationReason.HEADER_MISSING, evidence={'attempted': attempted})

	@classmethod
	def toast(cls, host: dict[str, Any]) -> 'VerificationSignal':
		return cls(reason=VerificationReason.TOAST, evidence={'toast': host})


class VerificationResult(BaseModel):
	"""Outcome of a verification poll loop"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	ok: bool
	reason: str = Field(description="Signal that fired, or 'verify_timeout'")
	evidence: dict[str, Any] = Field(default_factory=dict)
