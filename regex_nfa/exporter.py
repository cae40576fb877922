from __future__ import annotations
import json
from typing import Any, Dict

from .automaton import Automaton, State, Transition
from .simulator import TestResult


def automaton_to_dict(a: Automaton) -> dict:
    """
    Convierte un autómata a diccionario para exportación JSON.

    Args:
        a: El autómata a convertir

    Returns:
        Diccionario con los nombres de campo que consume la visualización
    """
    return {
        "states": [
            {"id": s.id, "label": s.label, "isStart": s.is_start, "isAccept": s.is_accept}
            for s in a.states
        ],
        "transitions": [
            {"id": t.id, "from": t.source, "to": t.target, "symbol": t.symbol}
            for t in a.transitions
        ],
        "startState": a.start_state,
        "acceptStates": list(a.accept_states),
    }


def automaton_from_dict(data: Dict[str, Any]) -> Automaton:
    """
    Reconstruye un autómata desde el formato de automaton_to_dict.

    Raises:
        ValueError: si faltan campos o el autómata no es consistente
    """
    try:
        states = [
            State(id=s["id"], label=s.get("label", s["id"]),
                  is_start=bool(s.get("isStart", False)), is_accept=bool(s.get("isAccept", False)))
            for s in data["states"]
        ]
        transitions = [
            Transition(id=t["id"], source=t["from"], target=t["to"], symbol=t["symbol"])
            for t in data["transitions"]
        ]
        start = data["startState"]
        accepts = data["acceptStates"]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Formato de autómata inválido: {e}") from e
    return Automaton(states=states, transitions=transitions, start_state=start, accept_states=accepts)


def result_to_dict(result: TestResult) -> dict:
    return {"accepted": result.accepted, "path": list(result.path)}


def export_json(a: Automaton, path: str) -> None:
    """
    Exporta un autómata a formato JSON.

    Args:
        a: El autómata a exportar
        path: Ruta del archivo de salida
    """
    data = automaton_to_dict(a)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_json(path: str) -> Automaton:
    with open(path, "r", encoding="utf-8") as f:
        return automaton_from_dict(json.load(f))


__all__ = ["automaton_to_dict", "automaton_from_dict", "result_to_dict", "export_json", "load_json"]
