from .service import TOAST_SCRIPT, VerificationEngine
from .views import VerificationReason, VerificationResult, VerificationSignal

__all__ = ['TOAST_SCRIPT', 'VerificationEngine', 'VerificationReason', 'VerificationResult', 'VerificationSignal']
