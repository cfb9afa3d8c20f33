"""
Process Extractor

Walks a generic notation value tree and produces the canonical ProcessModel.
Two historical document shapes describe the same process concept:

- modern (``:format :v3``): a flat ``:transitions`` vector where every
  transition carries its own ``:from``/``:to``/``:actor``/``:actions`` and
  entry transitions omit ``:from``
- legacy (``:process/id`` + ``:process/states`` + ``:process/transitions``):
  a declared state set and transitions whose ``:transition/from`` is one
  state or a set of states

Everything downstream only sees the canonical model.
"""

import logging
from typing import Dict, List, Optional, Tuple

from schemas.notation import (
    Bool, Keyword, Map, Nil, Set, Str, Symbol, Value, Vector, keyword, type_name,
)
from schemas.process_model import (
    DEFAULT_ACTOR, START_STATE, ProcessModel, ProcessNotification, SchemaVariant, Transition,
)
from services.errors import ProcessSchemaError

logger = logging.getLogger(__name__)

# Namespaces that are schema artifacts rather than domain content. Keywords
# always lose their namespace; strings only lose these known prefixes.
SCHEMA_NAMESPACES = ("actor.role", "action", "state", "notification", "transition", "process")

FORMAT_KEY = keyword("format")
TRANSITIONS_KEY = keyword("transitions")
NOTIFICATIONS_KEY = keyword("notifications")
PROCESS_ID_KEY = keyword("process/id")
PROCESS_STATES_KEY = keyword("process/states")
PROCESS_TRANSITIONS_KEY = keyword("process/transitions")


def _strip_namespace(text: str) -> str:
    for namespace in SCHEMA_NAMESPACES:
        if text.startswith(namespace + "/"):
            return text[len(namespace) + 1:]
    return text


def _is_absent(value: Optional[Value]) -> bool:
    return value is None or isinstance(value, Nil)


class _Draft:
    """Mutable transition under construction; frozen into a Transition at the end."""

    __slots__ = ("id", "actor", "from_states", "to", "actions", "notifications",
                 "entry", "privileged", "timed")

    def __init__(self, transition_id: str, to: str):
        self.id = transition_id
        self.to = to
        self.actor = DEFAULT_ACTOR
        self.from_states: List[str] = []
        self.actions: List[str] = []
        self.notifications: List[str] = []
        self.entry = False
        self.privileged = False
        self.timed = False

    def signature(self) -> Tuple:
        return (self.actor, self.to, tuple(self.actions), tuple(self.notifications),
                self.privileged, self.timed)

    def freeze(self) -> Transition:
        return Transition(
            id=self.id,
            actor=self.actor,
            from_states=tuple(self.from_states),
            to=self.to,
            actions=tuple(self.actions),
            notifications=tuple(self.notifications),
            entry=self.entry,
            privileged=self.privileged,
            timed=self.timed,
        )


class ProcessExtractor:
    """
    Deterministic converter from a notation value tree to a ProcessModel.

    Responsibilities:
    - Detect which document shape is in use
    - Strip schema namespaces from state, actor, action and transition names
    - Attribute entry transitions to one shared synthetic start state
    - Add every state a transition implies, declared or not
    - Fail fast with ProcessSchemaError instead of returning a partial model
    """

    def __init__(self, start_state: str = START_STATE):
        self.start_state = start_state

    def extract(self, root: Value) -> ProcessModel:
        if not isinstance(root, Map):
            raise ProcessSchemaError(
                f"Process document must be a map, got {type_name(root)}", key=None
            )

        variant = self.detect_variant(root)
        logger.debug("Detected %s process document", variant.value)
        if variant == SchemaVariant.MODERN:
            return self._extract_modern(root)
        return self._extract_legacy(root)

    def detect_variant(self, root: Map) -> SchemaVariant:
        has_legacy_keys = all(
            key in root for key in (PROCESS_ID_KEY, PROCESS_STATES_KEY, PROCESS_TRANSITIONS_KEY)
        )
        format_value = root.get(FORMAT_KEY)
        if format_value is not None:
            if self._name(format_value, "format") == "v3":
                return SchemaVariant.MODERN
            if not has_legacy_keys:
                raise ProcessSchemaError(
                    f"Unsupported process format '{self._name(format_value, 'format')}', expected v3",
                    key="format",
                )
        if has_legacy_keys:
            return SchemaVariant.LEGACY

        missing = [
            k.qualified for k in (PROCESS_ID_KEY, PROCESS_STATES_KEY, PROCESS_TRANSITIONS_KEY)
            if k not in root
        ]
        raise ProcessSchemaError(
            "Unrecognized process document: expected ':format :v3' or the keys "
            ":process/id, :process/states and :process/transitions "
            f"(missing {', '.join(':' + m for m in missing)})",
            key=missing[0],
        )

    # ---------- Modern shape ----------

    def _extract_modern(self, root: Map) -> ProcessModel:
        transitions_value = root.get(TRANSITIONS_KEY)
        if _is_absent(transitions_value):
            raise ProcessSchemaError("Missing :transitions in v3 process", key="transitions")
        items = self._sequence(transitions_value, "transitions")

        drafts = []
        for index, item in enumerate(items):
            where = f"transitions[{index}]"
            entry = self._require_map(item, where)
            transition_id = self._require_name(entry, keyword("name"), where)
            draft = _Draft(transition_id, self._require_state(entry, keyword("to"), transition_id))
            draft.from_states = self._optional_states(entry.get(keyword("from")), transition_id)
            draft.actor = self._optional_name(entry.get(keyword("actor")), "actor") or DEFAULT_ACTOR
            draft.actions = self._names(entry.get(keyword("actions")), f"{transition_id} actions")
            draft.privileged = self._flag(entry.get(keyword("privileged?")), "privileged?")
            draft.timed = not _is_absent(entry.get(keyword("at")))
            drafts.append(draft)

        notifications = self._modern_notifications(root.get(NOTIFICATIONS_KEY))
        return self._build_model(drafts, declared_states=[], process_id=None,
                                 variant=SchemaVariant.MODERN, notifications=notifications)

    def _modern_notifications(self, value: Optional[Value]) -> List[ProcessNotification]:
        if _is_absent(value):
            return []
        notifications = []
        for index, item in enumerate(self._sequence(value, "notifications")):
            where = f"notifications[{index}]"
            entry = self._require_map(item, where)
            notifications.append(ProcessNotification(
                name=self._require_name(entry, keyword("name"), where),
                on=self._optional_name(entry.get(keyword("on")), f"{where} on"),
                to=self._optional_name(entry.get(keyword("to")), f"{where} to"),
                template=self._optional_name(entry.get(keyword("template")), f"{where} template"),
            ))
        return notifications

    # ---------- Legacy shape ----------

    def _extract_legacy(self, root: Map) -> ProcessModel:
        process_id = self._name(root.get(PROCESS_ID_KEY), "process/id")

        states_value = root.get(PROCESS_STATES_KEY)
        if not isinstance(states_value, (Set, Vector)):
            raise ProcessSchemaError(
                f":process/states must be a set of states, got {type_name(states_value)}",
                key="process/states",
            )
        declared = [self._name(state, "process/states") for state in states_value]

        transitions_value = root.get(PROCESS_TRANSITIONS_KEY)
        if not isinstance(transitions_value, Vector):
            raise ProcessSchemaError(
                f":process/transitions must be a vector, got {type_name(transitions_value)}",
                key="process/transitions",
            )

        drafts = []
        for index, item in enumerate(transitions_value):
            where = f"process/transitions[{index}]"
            entry = self._require_map(item, where)
            transition_id = self._require_name(entry, keyword("transition/id"), where)
            draft = _Draft(transition_id, self._require_state(entry, keyword("transition/to"), transition_id))
            draft.from_states = self._optional_states(entry.get(keyword("transition/from")), transition_id)
            draft.actor = (
                self._optional_name(entry.get(keyword("transition/actor")), "transition/actor")
                or DEFAULT_ACTOR
            )
            draft.actions = self._names(entry.get(keyword("transition/actions")),
                                        f"{transition_id} transition/actions")
            draft.notifications = self._names(entry.get(keyword("transition/notifications")),
                                              f"{transition_id} transition/notifications")
            drafts.append(draft)

        return self._build_model(drafts, declared_states=declared, process_id=process_id,
                                 variant=SchemaVariant.LEGACY, notifications=[])

    # ---------- Shared assembly ----------

    def _build_model(
        self,
        drafts: List[_Draft],
        declared_states: List[str],
        process_id: Optional[str],
        variant: SchemaVariant,
        notifications: List[ProcessNotification],
    ) -> ProcessModel:
        has_entry = False
        for draft in drafts:
            if not draft.from_states:
                draft.from_states = [self.start_state]
                draft.entry = True
                has_entry = True

        merged = self._merge_duplicates(drafts)

        states: Dict[str, None] = {}
        if has_entry:
            states[self.start_state] = None
        for state in declared_states:
            states.setdefault(state, None)
        for draft in merged:
            for state in draft.from_states:
                states.setdefault(state, None)
            states.setdefault(draft.to, None)

        model = ProcessModel(
            states=tuple(states),
            transitions=tuple(d.freeze() for d in merged),
            process_id=process_id,
            variant=variant,
            notifications=tuple(notifications),
            start_state=self.start_state if has_entry else None,
        )
        logger.debug(
            "Extracted process %s: %d states, %d transitions",
            process_id or "(unnamed)", len(model.states), len(model.transitions),
        )
        return model

    def _merge_duplicates(self, drafts: List[_Draft]) -> List[_Draft]:
        """
        Keep transition ids unique. A repeated id with the same payload becomes
        one transition with the union of source states; a repeated id with a
        different payload gets a numeric suffix.
        """
        by_id: Dict[str, _Draft] = {}
        # Ids written in the document, so a generated suffix never takes one of them
        document_ids = {draft.id for draft in drafts}
        merged: List[_Draft] = []
        for draft in drafts:
            existing = by_id.get(draft.id)
            if existing is None:
                by_id[draft.id] = draft
                merged.append(draft)
                continue
            if existing.signature() == draft.signature():
                for state in draft.from_states:
                    if state not in existing.from_states:
                        existing.from_states.append(state)
                existing.entry = existing.entry or draft.entry
                continue

            suffix = 2
            while f"{draft.id}-{suffix}" in by_id or f"{draft.id}-{suffix}" in document_ids:
                suffix += 1
            logger.info("Transition id '%s' repeated with a different payload, renamed to '%s-%d'",
                        draft.id, draft.id, suffix)
            draft.id = f"{draft.id}-{suffix}"
            by_id[draft.id] = draft
            merged.append(draft)
        return merged

    # ---------- Value helpers ----------

    def _name(self, value: Optional[Value], key: str) -> str:
        if isinstance(value, (Keyword, Symbol)):
            return value.name
        if isinstance(value, Str) and value.value:
            return _strip_namespace(value.value)
        raise ProcessSchemaError(
            f"Expected a keyword, symbol or string for {key}, got {type_name(value) if value is not None else 'nothing'}",
            key=key,
        )

    def _optional_name(self, value: Optional[Value], key: str) -> Optional[str]:
        if _is_absent(value):
            return None
        return self._name(value, key)

    def _require_map(self, value: Value, where: str) -> Map:
        if not isinstance(value, Map):
            raise ProcessSchemaError(f"{where} must be a map, got {type_name(value)}", key=where)
        return value

    def _require_name(self, entry: Map, key: Keyword, where: str) -> str:
        value = entry.get(key)
        if _is_absent(value):
            raise ProcessSchemaError(f"{where} is missing :{key.qualified}", key=key.qualified)
        return self._name(value, key.qualified)

    def _require_state(self, entry: Map, key: Keyword, transition_id: str) -> str:
        value = entry.get(key)
        if _is_absent(value):
            raise ProcessSchemaError(
                f"Transition '{transition_id}' is missing :{key.qualified}", key=key.qualified
            )
        return self._name(value, key.qualified)

    def _optional_states(self, value: Optional[Value], transition_id: str) -> List[str]:
        """A single state, or a set/vector of states; empty means entry transition."""
        if _is_absent(value):
            return []
        if isinstance(value, (Set, Vector)):
            states: List[str] = []
            for item in value:
                state = self._name(item, f"{transition_id} from")
                if state not in states:
                    states.append(state)
            return states
        return [self._name(value, f"{transition_id} from")]

    def _names(self, value: Optional[Value], key: str) -> List[str]:
        """Action or notification names: bare keywords or maps carrying :name."""
        if _is_absent(value):
            return []
        names = []
        for item in self._sequence(value, key):
            if isinstance(item, Map):
                names.append(self._require_name(item, keyword("name"), key))
            else:
                names.append(self._name(item, key))
        return names

    def _sequence(self, value: Value, key: str) -> Tuple[Value, ...]:
        if not isinstance(value, (Vector, Set)):
            raise ProcessSchemaError(f"{key} must be a vector, got {type_name(value)}", key=key)
        return value.items

    def _flag(self, value: Optional[Value], key: str) -> bool:
        if _is_absent(value):
            return False
        if not isinstance(value, Bool):
            raise ProcessSchemaError(f":{key} must be true or false, got {type_name(value)}", key=key)
        return value.value


def extract(value: Value) -> ProcessModel:
    """Convert a parsed process document into the canonical ProcessModel."""
    return ProcessExtractor().extract(value)
