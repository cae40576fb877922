import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from regex_nfa.parser import InvalidPatternError, regex_to_postfix
from regex_nfa.thompson import postfix_to_nfa
from regex_nfa.simulator import test_string
from regex_nfa.exporter import export_json, result_to_dict


def create_parser() -> argparse.ArgumentParser:
    """Crear parser de argumentos de línea de comandos"""
    parser = argparse.ArgumentParser(
        description="Construcción de AFN (Thompson) a partir de regex y simulación de cadenas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos de uso:
  python main.py                          # Modo interactivo
  python main.py -r "a*b" -s "b,aab,ac"   # Simular cadenas específicas
  python main.py -r "(a|b)*abb" --json    # Exportar el AFN en JSON
  python main.py -f regexes.txt -o out    # Procesar archivo con múltiples regex

Operadores soportados:
  |    - Unión
  *    - Cero o más repeticiones
  ()   - Agrupación
  ε    - Cadena vacía
        """
    )

    input_group = parser.add_mutually_exclusive_group()
    input_group.add_argument("-r", "--regex", type=str, help="Regex a procesar")
    input_group.add_argument("-f", "--file", type=str, help="Archivo con regex (una por línea)")

    parser.add_argument(
        "-s", "--simulate",
        type=str,
        help="Cadenas a simular separadas por comas (ej: 'ab,aab,b'); '' para la cadena vacía"
    )
    parser.add_argument("-o", "--output", type=str, default="out", help="Directorio de salida (default: out)")
    parser.add_argument("--json", action="store_true", help="Exportar AFN y resultados en JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Salida detallada")
    parser.add_argument("--quiet", "-q", action="store_true", help="Silenciar salida no esencial")

    return parser


def process_regex(regex: str, args) -> Optional[dict]:
    """
    Procesar una regex individual.

    Returns:
        Dict con el postfix y el AFN, o None si hay error
    """
    try:
        if not args.quiet:
            print(f"Procesando regex: {regex!r}")

        postfix = regex_to_postfix(regex)
        if args.verbose:
            print(f"  Postfix: {postfix}")

        nfa = postfix_to_nfa(postfix)
        if args.verbose:
            print(f"  AFN: {len(nfa.states)} estados, {len(nfa.transitions)} transiciones, "
                  f"{len(nfa.accept_states)} aceptación")

        return {'regex': regex, 'postfix': postfix, 'nfa': nfa}

    except (InvalidPatternError, ValueError) as e:
        print(f"Error procesando '{regex}': {e}", file=sys.stderr)
        return None


def parse_strings(raw: str) -> List[str]:
    """Separa la lista de cadenas; '' o "" representan la cadena vacía."""
    strings = []
    for s in raw.split(','):
        s = s.strip()
        if s in ("''", '""'):
            strings.append("")
        elif s:
            strings.append(s)
    return strings


def simulate_strings(result: dict, strings: List[str], args) -> List[dict]:
    """Simular cadenas en el AFN y mostrar la trayectoria"""
    nfa = result['nfa']
    if not args.quiet:
        print(f"\nSimulación en AFN para '{result['regex']}':")

    outcomes = []
    for string in strings:
        res = test_string(nfa, string)
        status = "ACEPTADA" if res.accepted else "RECHAZADA"
        if args.verbose:
            print(f"  '{string}': {status}")
            print(f"    Trayectoria: {' → '.join(res.path)}")
        else:
            print(f"  '{string}': {status}")
        outcomes.append({'input': string, **result_to_dict(res)})
    return outcomes


def export_result(result: dict, outcomes: List[dict], args, output_dir: Path, index: int) -> None:
    """Exportar el AFN (y las simulaciones, si hay) a JSON"""
    regex_dir = output_dir / f"regex_{index}"
    regex_dir.mkdir(parents=True, exist_ok=True)

    export_json(result['nfa'], str(regex_dir / "afn.json"))
    if outcomes:
        with open(regex_dir / "simulaciones.json", "w", encoding="utf-8") as f:
            json.dump({'regex': result['regex'], 'results': outcomes}, f, ensure_ascii=False, indent=2)

    if not args.quiet:
        print(f"  Archivos JSON exportados para '{result['regex']}' en '{regex_dir}'")


def interactive_mode() -> None:
    print("=== Regex a AFN (Thompson) ===")
    print("Operadores soportados: |, *, (), ε")
    print("Para ayuda detallada: python main.py --help")
    print()

    class Args:
        quiet = False
        verbose = True

    args = Args()

    while True:
        regex = input("Ingrese regex r (o 'quit' para salir): ").strip()
        if regex.lower() in ['quit', 'exit', 'q']:
            break

        result = process_regex(regex, args)
        if not result:
            continue

        while True:
            w = input("Cadena a simular (Enter para nueva regex, '' para cadena vacía): ")
            if w == "":
                break
            simulate_strings(result, parse_strings(w) or [""], args)


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.quiet and args.verbose:
        print("Error: --quiet y --verbose son mutuamente excluyentes", file=sys.stderr)
        return 1

    #modo interactivo si no se especifica regex ni archivo
    if args.regex is None and not args.file:
        try:
            interactive_mode()
            return 0
        except (KeyboardInterrupt, EOFError):
            print("\nPrograma interrumpido por el usuario")
            return 0

    regexes = []
    if args.regex is not None:
        regexes.append(args.regex)

    if args.file:
        try:
            with open(args.file, 'r', encoding='utf-8') as f:
                regexes.extend(line.strip() for line in f if line.strip() and not line.strip().startswith('#'))
        except FileNotFoundError:
            print(f"Error: Archivo '{args.file}' no encontrado", file=sys.stderr)
            return 1

    if not regexes:
        print("Error: No hay regex para procesar", file=sys.stderr)
        return 1

    strings = parse_strings(args.simulate) if args.simulate is not None else []
    output_dir = Path(args.output)
    successful = 0
    errors = 0

    for i, regex in enumerate(regexes):
        result = process_regex(regex, args)
        if not result:
            errors += 1
            continue
        successful += 1
        outcomes = simulate_strings(result, strings, args) if strings else []
        if args.json:
            export_result(result, outcomes, args, output_dir, i)

    if not args.quiet:
        print(f"\n=== Resumen ===")
        print(f"Regex procesadas: {len(regexes)}")
        print(f"Exitosas: {successful}")
        print(f"Errores: {errors}")

    return 0 if errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
