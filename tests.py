#!/usr/bin/env python3
"""
Casos de prueba para el compilador de regex a AFN y el simulador.

Incluye:
- Pruebas unitarias para cada componente
- Leyes de concatenación, unión y estrella
- Casos extremos y de error
- Exportación JSON y CLI
"""

import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

from regex_nfa.parser import (
    InvalidPatternError, validate_regex, insert_concatenation, to_postfix, regex_to_postfix
)
from regex_nfa.thompson import build_nfa, postfix_to_nfa, Operator, IdGenerator, basic, concatenate
from regex_nfa.automaton import Automaton, State, Transition, EPSILON
from regex_nfa import simulator
from regex_nfa.exporter import (
    automaton_to_dict, automaton_from_dict, result_to_dict, export_json, load_json
)
import main as cli


def accepts(regex: str, string: str) -> bool:
    return simulator.test_string(build_nfa(regex), string).accepted


class TestPreprocessor(unittest.TestCase):
    """Pruebas para la inserción de concatenación explícita"""

    def test_insert_concatenation(self):
        test_cases = [
            ("", ""),
            ("a", "a"),
            ("ab", "a.b"),
            ("a*b", "a*.b"),
            ("a|b", "a|b"),
            ("(a|b)*abb", "(a|b)*.a.b.b"),
            ("a(b)", "a.(b)"),
            ("(a)(b)", "(a).(b)"),
            ("((ab))", "((a.b))"),
        ]

        for regex, expected in test_cases:
            with self.subTest(regex=regex):
                self.assertEqual(insert_concatenation(regex), expected)


class TestRegexParser(unittest.TestCase):
    """Pruebas para la conversión a postfix"""

    def test_to_postfix(self):
        test_cases = [
            ("a", "a"),
            ("a.b", "ab."),
            ("a|b", "ab|"),
            ("a*", "a*"),
            ("(a|b)*", "ab|*"),
            ("a.(b|c)", "abc|."),
            ("(a|b).(c|d)", "ab|cd|."),
            ("a.b.c", "ab.c."),
            ("a|b|c", "ab|c|"),
            ("a.b|c", "ab.c|"),
        ]

        for infix, expected in test_cases:
            with self.subTest(infix=infix):
                self.assertEqual(to_postfix(infix), expected)

    def test_regex_to_postfix(self):
        test_cases = [
            ("", ""),
            ("ab", "ab."),
            ("a*b", "a*b."),
            ("(a|b)*abb", "ab|*a.b.b."),
            ("a**", "a**"),
            ("aε", "aε."),
            ("ε|a", "εa|"),
        ]

        for regex, expected in test_cases:
            with self.subTest(regex=regex):
                self.assertEqual(regex_to_postfix(regex), expected)

    def test_validation_errors(self):
        """Pruebas para errores de validación"""
        invalid_cases = [
            ")",      # Paréntesis desbalanceados
            "(",      # Paréntesis desbalanceados
            "(a",
            "a)(",
            "()",     # Grupo vacío
            "*",      # Operador al inicio
            "(*a)",
            "a|*",
            "|",      # Unión sin operandos
            "a|",
            "|a",
            "a||b",
            "(|a)",
            "(a|)",
            "a.b",    # Caracter reservado
            "a" * 1001,
        ]

        for invalid_regex in invalid_cases:
            with self.subTest(regex=invalid_regex[:10]):
                with self.assertRaises(InvalidPatternError):
                    validate_regex(invalid_regex)
                with self.assertRaises(InvalidPatternError):
                    build_nfa(invalid_regex)

    def test_error_is_value_error(self):
        self.assertTrue(issubclass(InvalidPatternError, ValueError))

    def test_valid_regex(self):
        for regex in ["", "a", "a*", "(a|b)*abb", "((a))", "a**", "(a*)*", "x|y|z", "ε"]:
            with self.subTest(regex=regex):
                validate_regex(regex)


class TestThompsonConstruction(unittest.TestCase):
    """Pruebas para la construcción de Thompson"""

    def assertConsistent(self, nfa: Automaton):
        ids = {s.id for s in nfa.states}
        starts = [s.id for s in nfa.states if s.is_start]
        self.assertEqual(starts, [nfa.start_state])
        self.assertEqual({s.id for s in nfa.states if s.is_accept}, set(nfa.accept_states))
        for t in nfa.transitions:
            self.assertIn(t.source, ids)
            self.assertIn(t.target, ids)
        all_ids = [s.id for s in nfa.states] + [t.id for t in nfa.transitions]
        self.assertEqual(len(all_ids), len(set(all_ids)))

    def test_basic_fragment(self):
        nfa = build_nfa("a")
        self.assertEqual([s.id for s in nfa.states], ["s0", "s1"])
        self.assertEqual(nfa.start_state, "s0")
        self.assertEqual(nfa.accept_states, ("s1",))
        self.assertEqual(len(nfa.transitions), 1)
        t = nfa.transitions[0]
        self.assertEqual((t.source, t.target, t.symbol), ("s0", "s1", "a"))
        self.assertEqual([s.label for s in nfa.states], ["S0", "A1"])

    def test_concatenation_structure(self):
        nfa = build_nfa("ab")
        self.assertEqual(len(nfa.states), 4)
        self.assertEqual(nfa.start_state, "s0")
        self.assertEqual(len(nfa.accept_states), 1)
        epsilon = [t for t in nfa.transitions if t.symbol == EPSILON]
        self.assertEqual(len(epsilon), 1)
        self.assertEqual((epsilon[0].source, epsilon[0].target), ("s1", "s3"))

    def test_star_structure(self):
        nfa = build_nfa("a*")
        # 2 del símbolo + 2 nuevos
        self.assertEqual(len(nfa.states), 4)
        self.assertEqual(len(nfa.transitions), 5)
        self.assertEqual(nfa.start_state, "s3")
        self.assertEqual(nfa.accept_states, ("s4",))
        self.assertFalse(nfa.get_state("s0").is_start)
        self.assertFalse(nfa.get_state("s1").is_accept)

    def test_union_structure(self):
        nfa = build_nfa("a|b")
        self.assertEqual(len(nfa.states), 6)
        self.assertEqual(len(nfa.accept_states), 1)
        start_targets = set(nfa.transitions_from(nfa.start_state, EPSILON))
        self.assertEqual(start_targets, {"s0", "s3"})

    def test_empty_regex(self):
        nfa = build_nfa("")
        self.assertEqual(len(nfa.states), 1)
        self.assertEqual(nfa.transitions, ())
        state = nfa.states[0]
        self.assertTrue(state.is_start and state.is_accept)
        self.assertEqual(nfa.accept_states, (nfa.start_state,))

    def test_invariants_hold(self):
        for regex in ["a", "ab", "a|b", "a*", "(a|b)*abb", "(a*)*", "((a|b)c)*|d", "a(b|ε)c", "ε"]:
            with self.subTest(regex=regex):
                self.assertConsistent(build_nfa(regex))

    def test_ids_reset_per_build(self):
        first = build_nfa("(a|b)*")
        second = build_nfa("(a|b)*")
        self.assertEqual(first, second)
        self.assertEqual(build_nfa("c").start_state, "s0")

    def test_invalid_postfix(self):
        """Pruebas para postfix inválidos"""
        invalid_cases = [
            "*",    # Operador sin operando
            ".",    # Concatenación sin operandos
            "a.",   # Concatenación sin segundo operando
            "|",
            "ab|.",
            "ab",   # Dos fragmentos al final
        ]

        for invalid_postfix in invalid_cases:
            with self.subTest(postfix=invalid_postfix):
                with self.assertRaises(InvalidPatternError):
                    postfix_to_nfa(invalid_postfix)

    def test_operator_table(self):
        self.assertIs(Operator.from_token("*"), Operator.STAR)
        self.assertEqual(Operator.STAR.arity, 1)
        self.assertEqual(Operator.CONCAT.arity, 2)
        self.assertEqual(Operator.UNION.arity, 2)
        self.assertIsNone(Operator.from_token("a"))

    def test_concatenate_absorbs_accepting_start(self):
        """Si el inicio de b es de aceptación, las aceptaciones de a siguen aceptando"""
        ids = IdGenerator()
        a = basic(ids, "a")
        start = State(id="s9", label="S9", is_start=True, is_accept=True)
        b = Automaton(states=(start,), transitions=(), start_state="s9", accept_states=("s9",))
        ab = concatenate(ids, a, b)
        self.assertConsistent(ab)
        self.assertIn("s1", ab.accept_states)
        self.assertTrue(simulator.test_string(ab, "a").accepted)
        self.assertFalse(simulator.test_string(ab, "").accepted)


class TestAutomatonInvariants(unittest.TestCase):
    """Pruebas para las validaciones del autómata"""

    def test_missing_state_in_transition(self):
        s0 = State("s0", "S0", is_start=True, is_accept=True)
        with self.assertRaises(ValueError):
            Automaton((s0,), (Transition("t_1", "s0", "s5", "a"),), "s0", ("s0",))

    def test_start_flag_mismatch(self):
        s0 = State("s0", "S0")
        with self.assertRaises(ValueError):
            Automaton((s0,), (), "s0", ())

    def test_accept_flag_mismatch(self):
        s0 = State("s0", "S0", is_start=True)
        with self.assertRaises(ValueError):
            Automaton((s0,), (), "s0", ("s0",))

    def test_duplicate_state(self):
        s0 = State("s0", "S0", is_start=True)
        with self.assertRaises(ValueError):
            Automaton((s0, State("s0", "X")), (), "s0", ())

    def test_alphabet(self):
        self.assertEqual(build_nfa("(a|b)*abb").alphabet, {"a", "b"})
        self.assertEqual(build_nfa("a|ε").alphabet, {"a"})


class TestSimulation(unittest.TestCase):
    """Pruebas para la simulación del AFN"""

    def test_single_symbol(self):
        for c in ["a", "b", "z", "0", "#"]:
            with self.subTest(symbol=c):
                self.assertTrue(accepts(c, c))
                self.assertFalse(accepts(c, ""))
                self.assertFalse(accepts(c, c + c))

    def test_single_symbol_path(self):
        result = simulator.test_string(build_nfa("a"), "a")
        self.assertTrue(result.accepted)
        self.assertGreaterEqual(len(result.path), 2)
        self.assertEqual(result.path, ("s0", "s1"))

    def test_empty_string(self):
        cases = [
            ("a*", True),
            ("(a|b)*", True),
            ("a|b*", True),
            ("a|ε", True),
            ("", True),
            ("a", False),
            ("ab", False),
            ("a|b", False),
            ("a*b", False),
        ]
        for regex, expected in cases:
            with self.subTest(regex=regex):
                self.assertEqual(accepts(regex, ""), expected)

    def test_a_star_b(self):
        nfa = build_nfa("a*b")
        self.assertTrue(simulator.test_string(nfa, "b").accepted)
        self.assertTrue(simulator.test_string(nfa, "aab").accepted)

        dead = simulator.test_string(nfa, "ac")
        self.assertFalse(dead.accepted)
        # la trayectoria termina tras consumir 'a'
        after_a = simulator.move(nfa, simulator.epsilon_closure(nfa, [nfa.start_state]), "a")
        initial = simulator.epsilon_closure(nfa, [nfa.start_state])
        self.assertEqual(dead.path, tuple(initial + after_a))

    def test_dead_end_short_circuits(self):
        nfa = build_nfa("ab")
        result = simulator.test_string(nfa, "xab")
        self.assertFalse(result.accepted)
        self.assertEqual(result.path, ("s0",))

    def test_classic_example(self):
        nfa = build_nfa("(a|b)*abb")
        cases = [
            ("abb", True),
            ("aabb", True),
            ("babb", True),
            ("ababb", True),
            ("abab", False),
            ("ab", False),
            ("", False),
        ]
        for string, expected in cases:
            with self.subTest(string=string):
                self.assertEqual(simulator.test_string(nfa, string).accepted, expected)

    def test_concatenation_law(self):
        r1 = ["a", "b*", "a|c"]
        r2 = ["b", "(ab)*", "c|d"]
        samples = {
            "a": ["a"], "b*": ["", "b", "bb"], "a|c": ["a", "c"],
            "b": ["b"], "(ab)*": ["", "ab", "abab"], "c|d": ["c", "d"],
        }
        for x in r1:
            for y in r2:
                regex = f"({x})({y})"
                for s1 in samples[x]:
                    for s2 in samples[y]:
                        with self.subTest(regex=regex, string=s1 + s2):
                            self.assertTrue(accepts(regex, s1 + s2))

    def test_union_law(self):
        pairs = [("a", "b"), ("ab", "c*"), ("(ab)*", "ba")]
        strings = ["", "a", "b", "ab", "ba", "c", "cc", "abab", "aba"]
        for r1, r2 in pairs:
            for s in strings:
                with self.subTest(r1=r1, r2=r2, string=s):
                    expected = accepts(r1, s) or accepts(r2, s)
                    self.assertEqual(accepts(f"({r1})|({r2})", s), expected)

    def test_star_law(self):
        for s in ["", "ab", "abab", "ababab"]:
            with self.subTest(string=s):
                self.assertTrue(accepts("(ab)*", s))
        for s in ["a", "aba", "ba", "abb"]:
            with self.subTest(string=s):
                self.assertFalse(accepts("(ab)*", s))

    def test_epsilon_cycles_terminate(self):
        for regex in ["(a*)*", "((a*)*)*", "(a|b*)*", "(ε)*"]:
            with self.subTest(regex=regex):
                nfa = build_nfa(regex)
                self.assertTrue(simulator.test_string(nfa, "").accepted)
                closure = simulator.epsilon_closure(nfa, [nfa.start_state])
                self.assertEqual(len(closure), len(set(closure)))
        self.assertTrue(accepts("(a*)*", "aaaa"))
        self.assertFalse(accepts("(a*)*", "b"))

    def test_empty_regex(self):
        nfa = build_nfa("")
        self.assertTrue(simulator.test_string(nfa, "").accepted)
        result = simulator.test_string(nfa, "x")
        self.assertFalse(result.accepted)
        self.assertEqual(result.path, (nfa.start_state,))

    def test_epsilon_is_not_input(self):
        self.assertFalse(accepts("a|ε", "ε"))
        self.assertEqual(simulator.move(build_nfa("a*"), ["s3"], EPSILON), [])

    def test_epsilon_closure_order(self):
        nfa = build_nfa("a*")
        closure = simulator.epsilon_closure(nfa, ["s3"])
        self.assertEqual(closure[0], "s3")
        self.assertEqual(set(closure), {"s3", "s0", "s4"})


class TestExporter(unittest.TestCase):
    """Pruebas para exportación"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.nfa = build_nfa("(a|b)*abb")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_dict_format(self):
        data = automaton_to_dict(build_nfa("a"))
        self.assertEqual(data["startState"], "s0")
        self.assertEqual(data["acceptStates"], ["s1"])
        self.assertEqual(data["states"][0], {"id": "s0", "label": "S0", "isStart": True, "isAccept": False})
        self.assertEqual(data["transitions"], [{"id": "t_2", "from": "s0", "to": "s1", "symbol": "a"}])

    def test_json_export(self):
        json_path = os.path.join(self.temp_dir, "afn.json")
        export_json(self.nfa, json_path)
        self.assertTrue(os.path.exists(json_path))

        with open(json_path, encoding="utf-8") as f:
            content = f.read()
        self.assertIn("ε", content)
        data = json.loads(content)
        for key in ("states", "transitions", "startState", "acceptStates"):
            self.assertIn(key, data)

        self.assertEqual(load_json(json_path), self.nfa)

    def test_invalid_dict(self):
        with self.assertRaises(ValueError):
            automaton_from_dict({"states": []})
        data = automaton_to_dict(self.nfa)
        data["acceptStates"] = []
        with self.assertRaises(ValueError):
            automaton_from_dict(data)

    def test_result_dict(self):
        result = simulator.test_string(build_nfa("a"), "a")
        self.assertEqual(result_to_dict(result), {"accepted": True, "path": ["s0", "s1"]})


class TestCli(unittest.TestCase):
    """Pruebas del programa principal"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_simulate(self):
        code, out, _ = self.run_cli("-r", "a*b", "-s", "b,aab,ac,''")
        self.assertEqual(code, 0)
        self.assertIn("'aab': ACEPTADA", out)
        self.assertIn("'ac': RECHAZADA", out)
        self.assertIn("'': RECHAZADA", out)

    def test_invalid_regex(self):
        code, _, err = self.run_cli("-r", "(a", "-q")
        self.assertEqual(code, 1)
        self.assertIn("Paréntesis desbalanceados", err)

    def test_json_output(self):
        code, _, _ = self.run_cli("-r", "ab", "-s", "ab", "--json", "-o", self.temp_dir, "-q")
        self.assertEqual(code, 0)
        nfa = load_json(os.path.join(self.temp_dir, "regex_0", "afn.json"))
        self.assertEqual(nfa, build_nfa("ab"))
        with open(os.path.join(self.temp_dir, "regex_0", "simulaciones.json"), encoding="utf-8") as f:
            data = json.load(f)
        self.assertTrue(data["results"][0]["accepted"])

    def test_file_input(self):
        path = os.path.join(self.temp_dir, "regexes.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("# comentario\na|b\n(a\n")
        code, out, _ = self.run_cli("-f", path)
        self.assertEqual(code, 1)
        self.assertIn("Exitosas: 1", out)
        self.assertIn("Errores: 1", out)

    def test_quiet_and_verbose(self):
        code, _, err = self.run_cli("-r", "a", "-q", "-v")
        self.assertEqual(code, 1)
        self.assertIn("mutuamente excluyentes", err)


def run_all_tests():
    """Ejecutar todas las pruebas"""
    print("=== Ejecutando casos de prueba ===\n")

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    test_classes = [
        TestPreprocessor,
        TestRegexParser,
        TestThompsonConstruction,
        TestAutomatonInvariants,
        TestSimulation,
        TestExporter,
        TestCli,
    ]

    for test_class in test_classes:
        suite.addTests(loader.loadTestsFromTestCase(test_class))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    print(f"\n=== Resumen ===")
    print(f"Pruebas ejecutadas: {result.testsRun}")
    print(f"Fallas: {len(result.failures)}")
    print(f"Errores: {len(result.errors)}")

    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    exit(0 if success else 1)
