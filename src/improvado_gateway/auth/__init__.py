"""Consent flow: key verification, form codec and the approval state machine."""

from .approval import ApprovalOutcome, ApprovalProcessor, ApprovalState
from .consent import ConsentAction, ConsentDecision
from .engine import AuthorizationEngine, AuthRequest, CompletionResult
from .local_engine import LocalAuthorizationEngine
from .verifier import CredentialVerifier, KeyCheck


__all__ = [
    "ApprovalOutcome",
    "ApprovalProcessor",
    "ApprovalState",
    "AuthRequest",
    "AuthorizationEngine",
    "CompletionResult",
    "ConsentAction",
    "ConsentDecision",
    "CredentialVerifier",
    "KeyCheck",
    "LocalAuthorizationEngine",
]
