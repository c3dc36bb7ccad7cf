import io
import unittest

from bisaya.core.values import Value
from bisaya.lang.console import BufferIO
from bisaya.lang.error import ErrorHandler
from bisaya.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.errors = io.StringIO()
        self.stdout = io.StringIO()
        self.buffer = BufferIO()
        self.shell = Shell(ErrorHandler(fatal=False, stream=self.errors), io=self.buffer, stdout=self.stdout)

    def type_lines(self, *lines):
        for line in lines:
            self.shell.onecmd(line)

    def test_program(self):
        self.type_lines("SUGOD", "MUGNA NUMERO x=5")
        self.assertEqual(self.shell.prompt, Shell.secondary_prompt)
        self.assertEqual(self.buffer.data, "")

        self.type_lines("", "IPAKITA: x * 2", "KATAPUSAN")
        self.assertEqual(self.shell.prompt, Shell._tmp_prompt)
        self.assertEqual(self.buffer.data, "10")
        self.assertEqual(self.shell.env.get("x"), Value.of_int(5))

    def test_commands_inside_program(self):
        self.type_lines("SUGOD", "MUGNA NUMERO help", "help = 3", "IPAKITA: help", "KATAPUSAN")
        self.assertEqual(self.buffer.data, "3")

    def test_must_start_with_sugod(self):
        self.type_lines("IPAKITA: 1")
        self.assertIn("SUGOD", self.errors.getvalue())
        self.assertEqual(self.shell.prompt, Shell._tmp_prompt)

    def test_error_recovery(self):
        self.type_lines("SUGOD", "IPAKITA: 1 / 0", "KATAPUSAN")
        self.assertIn("division by zero", self.errors.getvalue())

        self.type_lines("SUGOD", "IPAKITA: 1", "KATAPUSAN")
        self.assertEqual(self.buffer.data, "1")

    def test_comments_on_delimiters(self):
        self.type_lines("SUGOD -- start", "IPAKITA: 7", "KATAPUSAN -- end")
        self.assertEqual(self.buffer.data, "7")
        self.assertEqual(self.shell.prompt, Shell._tmp_prompt)

    def test_vars(self):
        self.type_lines("vars")
        self.assertEqual(self.stdout.getvalue(), "no variables\n")

        self.type_lines("SUGOD", 'MUGNA LETRA c="z"', "KATAPUSAN", "vars")
        self.assertIn("c = CHAR('z')", self.stdout.getvalue())

    def test_help(self):
        self.type_lines("help", "")
        self.assertIn("KATAPUSAN", self.stdout.getvalue())
        self.assertEqual(self.errors.getvalue(), "")

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("EOF"))

        self.type_lines("SUGOD")
        self.assertTrue(self.shell.onecmd("EOF"))


if __name__ == '__main__':
    unittest.main()
