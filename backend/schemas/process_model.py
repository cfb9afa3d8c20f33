from __future__ import annotations
from typing import Tuple, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

# ---------- Core Enums ----------

class SchemaVariant(str, Enum):
    LEGACY = "v2"
    MODERN = "v3"

class Actor(str, Enum):
    """Actors the stock processes use. Any other actor string is kept verbatim."""
    CUSTOMER = "customer"
    PROVIDER = "provider"
    OPERATOR = "operator"
    SYSTEM = "system"

START_STATE = "initial"
DEFAULT_ACTOR = Actor.SYSTEM.value

# ---------- Process Models ----------

class Transition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    actor: str = DEFAULT_ACTOR
    from_states: Tuple[str, ...] = Field(default_factory=tuple)
    to: str
    actions: Tuple[str, ...] = Field(default_factory=tuple)
    notifications: Tuple[str, ...] = Field(default_factory=tuple)

    # True when the document gave no source state and the transition was
    # attributed to the synthetic start state.
    entry: bool = False
    privileged: bool = False
    timed: bool = False

class ProcessNotification(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    on: Optional[str] = None
    to: Optional[str] = None
    template: Optional[str] = None

class ProcessModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    states: Tuple[str, ...] = Field(default_factory=tuple)
    transitions: Tuple[Transition, ...] = Field(default_factory=tuple)
    process_id: Optional[str] = None
    variant: SchemaVariant
    notifications: Tuple[ProcessNotification, ...] = Field(default_factory=tuple)
    start_state: Optional[str] = None

    def transition(self, transition_id: str) -> Optional[Transition]:
        return next((t for t in self.transitions if t.id == transition_id), None)
