import unittest

from bisaya.core.ast import Block, Call, Literal
from bisaya.core.environment import Environment
from bisaya.core.evaluator import evaluate
from bisaya.core.lexer import tokenize
from bisaya.core.parser import parse
from bisaya.core.values import Value
from bisaya.lang.console import BufferIO
from bisaya.lang.error import BisayaRuntimeError


def run(*lines, stdin=(), strict=False, warn=None):
    """Runs the program made of lines and returns (output, environment)."""
    source = "\n".join(("SUGOD",) + lines + ("KATAPUSAN",))
    env, io = Environment(), BufferIO(stdin)
    evaluate(parse(tokenize(source)), env, io, strict=strict, warn=warn)
    return io.data, env


def output(*lines, **kwargs):
    return run(*lines, **kwargs)[0]


class EvaluatorTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "2 + 3 * 4": "14",
            "(2 + 3) * 4": "20",
            "7 / 2": "3",
            "-7 / 2": "-3",
            "-7 % 3": "-1",
            "7 % -3": "1",
            "7.0 / 2": "3.5",
            "1.5 + 1": "2.5",
            "0.5 * 4": "2",
            "10 - 2 - 3": "5",
            "-(3 - 5)": "2",
        }
        for expr, result in cases.items():
            self.assertEqual(output(f"IPAKITA: {expr}"), result)

    def test_logic(self):
        cases = {
            '"OO" UG "DILI"': "DILI",
            '"OO" O "DILI"': "OO",
            'DILI "OO"': "DILI",
            "1 < 2 UG 3 >= 3": "OO",
            "1 <> 1": "DILI",
            "'a' == \"a\"": "OO",
            '"abc" < "abd"': "OO",
        }
        for expr, result in cases.items():
            self.assertEqual(output(f"IPAKITA: {expr}"), result)

    def test_coercion(self):
        self.assertEqual(output('IPAKITA: 5 + "OO"'), "5OO")
        self.assertEqual(output("IPAKITA: 'a' + 'b'"), "ab")
        self.assertEqual(output('IPAKITA: "x" + 1.5'), "x1.5")

    def test_declarations(self):
        out, env = run(
            "MUGNA NUMERO a, b=5",
            "MUGNA TIPIK f=2",
            "MUGNA LETRA c='n', s=\"name\"",
            'MUGNA TINUOD t="OO"',
            "IPAKITA: a & b & f & c & s & t",
        )
        self.assertEqual(out, "052nnameOO")
        self.assertEqual(env.get("a"), Value.of_int(0))
        self.assertEqual(env.get("f"), Value.of_float(2.0))
        self.assertEqual(env.get("c"), Value.of_char("n"))

    def test_output(self):
        self.assertEqual(output('IPAKITA: "a" & $ & "b" & [#] & [[] & []]'), "a\nb#[]")
        self.assertEqual(output('MUGNA TINUOD t="OO"', "IPAKITA: t"), "OO")
        self.assertEqual(output("IPAKITA: 1", "IPAKITA: 2"), "12")

    def test_assignment(self):
        out, env = run("MUGNA NUMERO x, y", "x=y=4", "IPAKITA: x & y")
        self.assertEqual(out, "44")

        out, env = run("MUGNA NUMERO x=1", "x++", "x++", "x--", "IPAKITA: x")
        self.assertEqual(out, "2")

    def test_if_chain(self):
        program = (
            "KUNG (x > 5) PUNDOK {",
            "  IPAKITA: \"big\"",
            "}",
            "KUNG DILI (x > 0) PUNDOK {",
            "  IPAKITA: \"small\"",
            "}",
            "KUNG WALA PUNDOK {",
            "  IPAKITA: \"none\"",
            "}",
        )
        cases = {10: "big", 3: "small", -1: "none"}
        for x, result in cases.items():
            self.assertEqual(output(f"MUGNA NUMERO x={x}", *program), result)

        program = (
            'KUNG (x > 0) PUNDOK { IPAKITA: "positive" }',
            'KUNG DILI (x < 0) PUNDOK { IPAKITA: "negative" }',
            'KUNG WALA PUNDOK { IPAKITA: "zero" }',
        )
        cases = {0: "zero", 7: "positive", -7: "negative"}
        for x, result in cases.items():
            self.assertEqual(output(f"MUGNA NUMERO x={x}", *program), result)

    def test_while(self):
        out = output("MUGNA NUMERO i=0", "MINTRAS (i < 3) PUNDOK {", "  IPAKITA: i", "  i++", "}")
        self.assertEqual(out, "012")

        out = output("MUGNA NUMERO i=5", "MINTRAS (i < 3) PUNDOK {", "  IPAKITA: i", "}")
        self.assertEqual(out, "")

    def test_do_while(self):
        out = output("BUHAT PUNDOK {", '  IPAKITA: "once"', "}", 'MINTRAS (DILI "OO")')
        self.assertEqual(out, "once")

        out = output("MUGNA NUMERO i=0", "BUHAT {", "  i = i + 1", "} MINTRAS (i < 3)", "IPAKITA: i")
        self.assertEqual(out, "3")

    def test_for(self):
        out = output("MUGNA NUMERO i", "ALANG SA (i=0, i<3, i++) PUNDOK {", '  IPAKITA: i & " "', "}")
        self.assertEqual(out, "0 1 2 ")

        out = output("MUGNA NUMERO i", "ALANG SA (i=10, i>0, i=i-4) PUNDOK { IPAKITA: i & $ }")
        self.assertEqual(out, "10\n6\n2\n")

        out = output("MUGNA NUMERO i", "ALANG SA (i=3, i>0, --i) PUNDOK { IPAKITA: i }")
        self.assertEqual(out, "321")

    def test_prefix_decrement(self):
        out, env = run("MUGNA NUMERO x=3", "--x", "IPAKITA: x")
        self.assertEqual(out, "2")

        out, env = run("MUGNA NUMERO x=3, y", "y = --x", "IPAKITA: x & y")
        self.assertEqual(out, "22")

    def test_nested_blocks(self):
        out = output(
            "MUGNA NUMERO i, j",
            "ALANG SA (i=1, i<=2, i++) PUNDOK {",
            "  ALANG SA (j=1, j<=2, j++) PUNDOK {",
            "    KUNG (i == j) PUNDOK {",
            "      IPAKITA: i * j",
            "    }",
            "  }",
            "}",
        )
        self.assertEqual(out, "14")

    def test_input(self):
        out, env = run("MUGNA NUMERO x", "MUGNA LETRA y", "DAWAT: x, y", "IPAKITA: x & y", stdin=["5, a"])
        self.assertEqual(out, "5a")
        self.assertEqual(env.get("x"), Value.of_int(5))
        self.assertEqual(env.get("y"), Value.of_char("a"))

        out, env = run('MUGNA LETRA s="text"', "MUGNA TINUOD t", "DAWAT: s, t", stdin=["hello world,OO"])
        self.assertEqual(env.get("s"), Value.of_string("hello world"))
        self.assertEqual(env.get("t"), Value.of_bool(True))

    def test_input_extra_fields(self):
        warnings = []
        run("MUGNA NUMERO x", "DAWAT: x", stdin=["1,2,3"], warn=lambda *args, **kwargs: warnings.append(args))
        self.assertEqual(warnings, [("{} extra input value(s) ignored", "2")])

    def test_strict(self):
        self.assertEqual(output("MUGNA NUMERO x=1", 'x = "text"', "IPAKITA: x"), "text")
        self.assertEqual(output("MUGNA LETRA c", 'c = "z"', "IPAKITA: c", strict=True), "z")

        with self.assertRaises(BisayaRuntimeError) as context:
            run("MUGNA NUMERO x=1", 'x = "text"', strict=True)
        self.assertEqual(str(context.exception), "cannot assign string value to x, which holds integer value")

    def test_call(self):
        with self.assertRaises(BisayaRuntimeError):
            evaluate(Block((Call("f", (Literal(Value.of_int(1)),)),)), Environment(), BufferIO())

    def test_errors(self):
        should_fail = [
            ("IPAKITA: x",),                                  # undeclared
            ("x = y + 1",),                                   # undeclared on the right
            ("IPAKITA: 1 / 0",),
            ("IPAKITA: 1.5 % 0",),
            ("KUNG (1) PUNDOK {", "}"),                       # non-boolean condition
            ("MINTRAS (\"text\") PUNDOK {", "}"),
            ('IPAKITA: "OO" UG 1',),
            ("IPAKITA: DILI 1",),
            ('IPAKITA: -"text"',),
            ('IPAKITA: "a" * 2',),
            ('IPAKITA: 1 < "a"',),
            ('MUGNA NUMERO x="text"',),
            ('MUGNA TINUOD t=1',),
        ]
        for case in should_fail:
            self.assertRaises(BisayaRuntimeError, run, *case)

    def test_input_errors(self):
        should_fail = [
            (("MUGNA NUMERO x", "DAWAT: x"), []),              # end of input
            (("MUGNA NUMERO x, y", "DAWAT: x, y"), ["1"]),     # too few fields
            (("MUGNA NUMERO x", "DAWAT: x"), ["abc"]),         # not a number
            (("MUGNA TINUOD t", "DAWAT: t"), ["yes"]),
            (("DAWAT: x",), ["1"]),                            # undeclared
        ]
        for lines, stdin in should_fail:
            self.assertRaises(BisayaRuntimeError, run, *lines, stdin=stdin)

    def test_error_position(self):
        with self.assertRaises(BisayaRuntimeError) as context:
            run("MUGNA NUMERO x=0", "IPAKITA: 10 / x")
        self.assertEqual(str(context.exception), "division by zero")
        self.assertEqual((context.exception.line, context.exception.column), (3, 13))


if __name__ == '__main__':
    unittest.main()
