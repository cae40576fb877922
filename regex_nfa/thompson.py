from __future__ import annotations
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from .automaton import Automaton, State, Transition, EPSILON
from . import parser
from .parser import InvalidPatternError, regex_to_postfix


class IdGenerator:
    """Contador de ids para una sola construcción.

    Estados y transiciones comparten el contador, de modo que los ids son
    únicos dentro del autómata final. Cada llamada a build_nfa usa el suyo.
    """

    def __init__(self) -> None:
        self._next = 0

    def next_id(self) -> int:
        n = self._next
        self._next += 1
        return n

    def state(self, role: str) -> State:
        n = self.next_id()
        #etiqueta: inicial del rol + numero (S0, A1, ...)
        return State(id=f"s{n}", label=f"{role[0].upper()}{n}")

    def transition(self, source: str, target: str, symbol: str = EPSILON) -> Transition:
        return Transition(id=f"t_{self.next_id()}", source=source, target=target, symbol=symbol)


def _strip(states, start: bool = False, accept=()) -> List[State]:
    """Copia los estados con nuevas banderas (start solo se conserva si se pide)."""
    accept = set(accept)
    return [
        replace(s, is_start=s.is_start and start, is_accept=s.id in accept)
        for s in states
    ]


# ---------------- Fragmentos -----------------
def basic(ids: IdGenerator, symbol: str) -> Automaton:
    """Fragmento para un símbolo: inicio --symbol--> aceptación. ε produce una transición ε."""
    start = replace(ids.state("start"), is_start=True)
    accept = replace(ids.state("accept"), is_accept=True)
    return Automaton(
        states=(start, accept),
        transitions=(ids.transition(start.id, accept.id, symbol),),
        start_state=start.id,
        accept_states=(accept.id,),
    )


def empty(ids: IdGenerator) -> Automaton:
    """Autómata de la cadena vacía: un único estado inicial y de aceptación."""
    state = replace(ids.state("start"), is_start=True, is_accept=True)
    return Automaton(states=(state,), transitions=(), start_state=state.id, accept_states=(state.id,))


def star(ids: IdGenerator, a: Automaton) -> Automaton:
    start = replace(ids.state("start"), is_start=True)
    accept = replace(ids.state("accept"), is_accept=True)

    transitions = [
        ids.transition(start.id, a.start_state),
        ids.transition(start.id, accept.id),  #cero repeticiones
        *a.transitions,
    ]
    #de aceptaciones antiguas epsilon al inicio (repetir) y al nuevo fin (salir)
    transitions += [ids.transition(s, a.start_state) for s in a.accept_states]
    transitions += [ids.transition(s, accept.id) for s in a.accept_states]

    return Automaton(
        states=(start, *_strip(a.states), accept),
        transitions=tuple(transitions),
        start_state=start.id,
        accept_states=(accept.id,),
    )


def concatenate(ids: IdGenerator, a: Automaton, b: Automaton) -> Automaton:
    accepts = list(b.accept_states)
    if b.start_state in b.accept_states:
        #el inicio de b ya acepta: las aceptaciones de a conservan la suya
        accepts += [s for s in a.accept_states if s not in accepts]

    transitions = [
        *a.transitions,
        *(ids.transition(s, b.start_state) for s in a.accept_states),
        *b.transitions,
    ]
    return Automaton(
        states=(*_strip(a.states, start=True, accept=accepts), *_strip(b.states, accept=accepts)),
        transitions=tuple(transitions),
        start_state=a.start_state,
        accept_states=tuple(accepts),
    )


def union(ids: IdGenerator, a: Automaton, b: Automaton) -> Automaton:
    start = replace(ids.state("start"), is_start=True)
    accept = replace(ids.state("accept"), is_accept=True)

    transitions = [
        ids.transition(start.id, a.start_state),
        ids.transition(start.id, b.start_state),
        *a.transitions,
        *b.transitions,
    ]
    transitions += [ids.transition(s, accept.id) for s in a.accept_states]
    transitions += [ids.transition(s, accept.id) for s in b.accept_states]

    return Automaton(
        states=(start, *_strip(a.states), *_strip(b.states), accept),
        transitions=tuple(transitions),
        start_state=start.id,
        accept_states=(accept.id,),
    )


class Operator(Enum):
    """Operadores del postfix: símbolo, aridad y combinador de fragmentos."""

    STAR = (parser.STAR, 1, star)
    CONCAT = (parser.CONCAT, 2, concatenate)
    UNION = (parser.UNION, 2, union)

    def __init__(self, token: str, arity: int, combine: Callable[..., Automaton]) -> None:
        self.token = token
        self.arity = arity
        self.combine = combine

    @classmethod
    def from_token(cls, token: str) -> Optional["Operator"]:
        return _BY_TOKEN.get(token)


_BY_TOKEN: Dict[str, Operator] = {op.token: op for op in Operator}


def postfix_to_nfa(postfix: str) -> Automaton:
    """Construye un AFN usando Thompson a partir de una regex en postfix.

    Operadores: | union, . concatenación, * estrella.
    Cualquier otro caracter es un símbolo literal (ε incluido).
    El postfix vacío produce el autómata de la cadena vacía.

    Raises:
        InvalidPatternError: si un operador no tiene suficientes operandos
            o al final queda más de un fragmento en la pila.
    """
    ids = IdGenerator()
    stack: List[Automaton] = []

    for pos, token in enumerate(postfix):
        op = Operator.from_token(token)
        if op is None:
            stack.append(basic(ids, token))
            continue
        if len(stack) < op.arity:
            raise InvalidPatternError(
                f"Operador '{token}' sin operandos suficientes en la posición {pos} del postfix"
            )
        #operandos en orden de apilado: a antes que b
        operands = stack[-op.arity:]
        del stack[-op.arity:]
        stack.append(op.combine(ids, *operands))

    if not stack:
        return empty(ids)
    if len(stack) != 1:
        raise InvalidPatternError(f"Regex postfix inválida (pila final con {len(stack)} fragmentos)")
    return stack.pop()


def build_nfa(regex: str) -> Automaton:
    """Valida la regex, la convierte a postfix y construye su AFN."""
    return postfix_to_nfa(regex_to_postfix(regex))


__all__ = ["build_nfa", "postfix_to_nfa", "Operator", "IdGenerator"]
