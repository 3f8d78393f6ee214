"""In-process engine for test doubles: setups, call resolution and verification.

A substitute object forwards each call to :meth:`MockHandler.invoke`. The
handler records the call, applies any chaos policy, picks the matching setup,
runs its side effects and produces the result. Verification queries the
recorded calls afterwards.
"""

from __future__ import annotations

from .chaos import ChaosPolicy, ChaosStatistics
from .defaults import DefaultValue, MockDefaultValueProvider
from .errors import (
    MockError,
    NotAMockError,
    SequenceViolationError,
    UmbraError,
    UnmatchedCallError,
    VerificationError,
)
from .handler import MockBehavior, MockHandler
from .journal import Invocation
from .matchers import (
    Any,
    ArgumentMatcher,
    Contains,
    InRange,
    IsIn,
    IsNotIn,
    It,
    Match,
    NotNull,
    Predicate,
    Range,
    Regex,
    StartsWith,
)
from .mock import (
    Mocked,
    chaos,
    handler_of,
    is_mock,
    raise_event,
    setup,
    setup_sequence,
    verify,
)
from .repository import MockRepository
from .sequence import MockSequence
from .setups import CALL_BASE, SequenceSetup, Setup
from .verifiers import Times

__all__ = [
    "CALL_BASE",
    "Any",
    "ArgumentMatcher",
    "ChaosPolicy",
    "ChaosStatistics",
    "Contains",
    "DefaultValue",
    "InRange",
    "Invocation",
    "IsIn",
    "IsNotIn",
    "It",
    "Match",
    "MockBehavior",
    "MockDefaultValueProvider",
    "MockError",
    "MockHandler",
    "MockRepository",
    "MockSequence",
    "Mocked",
    "NotAMockError",
    "NotNull",
    "Predicate",
    "Range",
    "Regex",
    "SequenceSetup",
    "SequenceViolationError",
    "Setup",
    "StartsWith",
    "Times",
    "UmbraError",
    "UnmatchedCallError",
    "VerificationError",
    "chaos",
    "handler_of",
    "is_mock",
    "raise_event",
    "setup",
    "setup_sequence",
    "verify",
]
