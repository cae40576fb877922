from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

EPSILON = "ε"


@dataclass(frozen=True)
class State:
    id: str
    label: str
    is_start: bool = False
    is_accept: bool = False


@dataclass(frozen=True)
class Transition:
    id: str
    source: str
    target: str
    symbol: str

    @property
    def is_epsilon(self) -> bool:
        return self.symbol == EPSILON


@dataclass(frozen=True)
class Automaton:
    """Representa un AFN inmutable (con transiciones ε) construido por Thompson.

    - states: tupla ordenada de estados (cada uno con sus banderas inicio/aceptación).
    - transitions: tupla ordenada de transiciones (origen, destino, símbolo).
    - start_state: id del único estado inicial.
    - accept_states: ids de los estados de aceptación.

    Al crearse verifica que las banderas de los estados coincidan con
    start_state y accept_states, y que cada transición apunte a estados
    existentes. Construye además un índice estado -> símbolo -> destinos
    para que la simulación no recorra toda la lista de transiciones.
    """

    states: Tuple[State, ...]
    transitions: Tuple[Transition, ...]
    start_state: str
    accept_states: Tuple[str, ...]
    _by_id: Dict[str, State] = field(default_factory=dict, init=False, repr=False, compare=False)
    _index: Dict[str, Dict[str, List[str]]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        #normalizar a tuplas para que el valor sea realmente inmutable
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "transitions", tuple(self.transitions))
        object.__setattr__(self, "accept_states", tuple(self.accept_states))

        for s in self.states:
            if s.id in self._by_id:
                raise ValueError(f"Estado duplicado: {s.id}")
            self._by_id[s.id] = s
            self._index[s.id] = {}

        starts = [s.id for s in self.states if s.is_start]
        if starts != [self.start_state]:
            raise ValueError(
                f"Se esperaba un único estado inicial '{self.start_state}', marcados: {starts}"
            )

        flagged = {s.id for s in self.states if s.is_accept}
        if flagged != set(self.accept_states):
            raise ValueError(
                f"Estados de aceptación inconsistentes: banderas {sorted(flagged)} "
                f"vs lista {sorted(self.accept_states)}"
            )

        seen: Set[str] = set()
        for t in self.transitions:
            if t.id in seen:
                raise ValueError(f"Transición duplicada: {t.id}")
            seen.add(t.id)
            if t.source not in self._by_id or t.target not in self._by_id:
                raise ValueError(f"Estado inexistente en la transición: {t.source} -> {t.target}")
            self._index[t.source].setdefault(t.symbol, []).append(t.target)

    # ---------------- Consultas -----------------
    def get_state(self, state_id: str) -> State:
        try:
            return self._by_id[state_id]
        except KeyError:
            raise KeyError(f"Estado inexistente: {state_id}") from None

    def transitions_from(self, state_id: str, symbol: str) -> List[str]:
        """Destinos alcanzables desde state_id consumiendo symbol (o ε)."""
        return list(self._index.get(state_id, {}).get(symbol, ()))

    def is_accepting(self, state_id: str) -> bool:
        return state_id in self.accept_states

    @property
    def alphabet(self) -> Set[str]:
        return {t.symbol for t in self.transitions if not t.is_epsilon}


__all__ = ["Automaton", "State", "Transition", "EPSILON"]
