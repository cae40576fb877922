from __future__ import annotations
from typing import List

#operadores soportados: | union, concatenacion implicita, * estrella, () agrupacion
#la regex se convierte a postfix (notacion inversa polaca) con shunting yard,
#insertando antes "." como operador explicito de concatenacion.

CONCAT = "."
UNION = "|"
STAR = "*"
LPAREN = "("
RPAREN = ")"

PRECEDENCE = {STAR: 3, CONCAT: 2, UNION: 1, LPAREN: 0}
OPERATORS = {STAR, CONCAT, UNION}

MAX_REGEX_LENGTH = 1000


class InvalidPatternError(ValueError):
    """Excepción específica para regex mal formadas"""
    pass


def validate_regex(regex: str) -> None:
    """
    Valida que la regex sea sintácticamente correcta antes de construir el AFN.

    La regex vacía es válida (representa la cadena vacía).

    Args:
        regex: La expresión regular a validar

    Raises:
        InvalidPatternError: Si la regex tiene errores sintácticos
    """
    if len(regex) > MAX_REGEX_LENGTH:
        raise InvalidPatternError(f"Regex demasiado larga (máximo {MAX_REGEX_LENGTH} caracteres)")

    depth = 0
    for i, char in enumerate(regex):
        prev_char = regex[i - 1] if i > 0 else None
        next_char = regex[i + 1] if i + 1 < len(regex) else None

        if char == CONCAT:
            raise InvalidPatternError(f"Caracter reservado '{CONCAT}' en la posición {i}")

        elif char == LPAREN:
            depth += 1
            if next_char == RPAREN:
                raise InvalidPatternError(f"Grupo vacío '()' en la posición {i}")

        elif char == RPAREN:
            depth -= 1
            if depth < 0:
                raise InvalidPatternError("Paréntesis desbalanceados: ')' sin '(' correspondiente")

        elif char == STAR:
            if prev_char is None:
                raise InvalidPatternError(f"Operador '{STAR}' al inicio de regex")
            if prev_char in {UNION, LPAREN}:
                raise InvalidPatternError(f"Operador '{STAR}' despues de '{prev_char}'")

        elif char == UNION:
            if prev_char is None or next_char is None:
                raise InvalidPatternError(f"Operador '{UNION}' sin operando")
            if prev_char in {UNION, LPAREN} or next_char in {UNION, RPAREN}:
                raise InvalidPatternError(f"Operador '{UNION}' mal posicionado en la posición {i}")

    if depth != 0:
        raise InvalidPatternError("Paréntesis desbalanceados: '(' sin ')' correspondiente")


def insert_concatenation(regex: str) -> str:
    """
    Inserta el operador explícito de concatenación entre símbolos adyacentes.

    Tras emitir cada caracter se añade "." si el actual no es "(" ni "|"
    y el siguiente no es "|", "*" ni ")".

    >>> insert_concatenation("(a|b)*abb")
    '(a|b)*.a.b.b'
    """
    result: List[str] = []
    for i, curr in enumerate(regex):
        result.append(curr)
        if i == len(regex) - 1 or curr in {LPAREN, UNION}:
            continue
        if regex[i + 1] not in {UNION, STAR, RPAREN}:
            result.append(CONCAT)
    return "".join(result)


def to_postfix(infix: str) -> str:
    """
    Convierte una regex con concatenación explícita a notación postfix.

    Precedencia: * (3) > . (2) > | (1); "(" actúa como barrera y nunca
    aparece en la salida. Todos los operadores se tratan como asociativos
    por la izquierda. No valida paréntesis: eso ocurre en validate_regex.

    Args:
        infix: Regex en notación infija con "." explícito

    Returns:
        Regex en notación postfix
    """
    output: List[str] = []
    stack: List[str] = []

    for t in infix:
        if t == LPAREN:
            stack.append(t)
        elif t == RPAREN:
            while stack and stack[-1] != LPAREN:
                output.append(stack.pop())
            if stack:
                stack.pop()  #descartar "("
        elif t in OPERATORS:
            while stack and stack[-1] != LPAREN and PRECEDENCE[stack[-1]] >= PRECEDENCE[t]:
                output.append(stack.pop())
            stack.append(t)
        else:
            #simbolo del alfabeto (incluye ε)
            output.append(t)

    while stack:
        op = stack.pop()
        if op != LPAREN:
            output.append(op)

    return "".join(output)


def regex_to_postfix(regex: str) -> str:
    """Valida la regex, inserta concatenaciones y la convierte a postfix."""
    validate_regex(regex)
    return to_postfix(insert_concatenation(regex))


__all__ = [
    "CONCAT", "UNION", "STAR",
    "InvalidPatternError", "validate_regex", "insert_concatenation",
    "to_postfix", "regex_to_postfix",
]
