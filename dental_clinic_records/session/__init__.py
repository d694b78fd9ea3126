"""
Session Layer - Authentication and Account Operations

Submodules:
    session_manager.py → SessionManager state machine + callback types

Dependency Rule:
    This layer depends on: core, repository
    This layer is used by: clinic

Date: October 2026
"""

from dental_clinic_records.session.session_manager import (
    Confirm,
    Credentials,
    ReenablePrompt,
    SessionManager,
)

__all__ = ["Confirm", "Credentials", "ReenablePrompt", "SessionManager"]
