from src.conversation.admission import AdmissionGate, PauseTracker, RateLimiter
from src.conversation.dialogue import DialogueEngine, TurnResult
from src.conversation.session_store import SessionStore
from src.conversation.state_machine import (
    BookingStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)
from src.schemas.session_schema import DialogueState

__all__ = [
    "AdmissionGate",
    "PauseTracker",
    "RateLimiter",
    "DialogueEngine",
    "TurnResult",
    "SessionStore",
    "BookingStateMachine",
    "InvalidTransitionError",
    "TransitionTrigger",
    "DialogueState",
]
