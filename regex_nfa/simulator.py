from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .automaton import Automaton, EPSILON


@dataclass(frozen=True)
class TestResult:
    """Resultado de simular una cadena: aceptación y estados visitados."""

    __test__ = False  #no es una clase de pruebas

    accepted: bool
    path: Tuple[str, ...]


def epsilon_closure(automaton: Automaton, states: Iterable[str]) -> List[str]:
    """
    Devuelve la ε-clausura de un conjunto de estados.

    El orden es determinista: primero los estados recibidos y luego los
    descubiertos. Cada estado se visita una sola vez, por lo que los ciclos
    ε (p. ej. los de (a*)*) no impiden terminar.
    """
    closure = list(dict.fromkeys(states))
    visited = set(closure)
    stack = list(closure)

    while stack:
        current = stack.pop()
        for next_state in automaton.transitions_from(current, EPSILON):
            if next_state not in visited:
                visited.add(next_state)
                closure.append(next_state)
                stack.append(next_state)

    return closure


def move(automaton: Automaton, states: Iterable[str], symbol: str) -> List[str]:
    """Estados alcanzables consumiendo symbol desde states, ya con su ε-clausura."""
    if symbol == EPSILON:
        #ε no es un símbolo de entrada
        return []
    targets: List[str] = []
    for s in states:
        targets.extend(automaton.transitions_from(s, symbol))
    return epsilon_closure(automaton, targets)


def test_string(automaton: Automaton, input_str: str) -> TestResult:
    """
    Simula el AFN sobre input_str.

    La trayectoria incluye todos los estados de cada paso (la clausura
    inicial y la de cada símbolo consumido). Si algún símbolo deja el
    conjunto actual vacío se rechaza sin procesar el resto de la cadena.
    """
    current = epsilon_closure(automaton, [automaton.start_state])
    path = list(current)

    for ch in input_str:
        current = move(automaton, current, ch)
        if not current:
            return TestResult(accepted=False, path=tuple(path))
        path.extend(current)

    accepted = any(automaton.is_accepting(s) for s in current)
    return TestResult(accepted=accepted, path=tuple(path))


#no es un test
test_string.__test__ = False

__all__ = ["TestResult", "epsilon_closure", "move", "test_string"]
