import io
import unittest
from contextlib import redirect_stdout

from monkey.runtime.environment import Environment
from monkey.runtime.evaluator import evaluate, is_truthy, wrap_int64
from monkey.runtime.object import FALSE, NULL, TRUE, Array, Error, Function, Hash, Integer, String
from monkey.syntax.lexer import Lexer
from monkey.syntax.parser import Parser


def run(source, env=None):
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    assert not parser.errors, parser.errors
    return evaluate(program, env if env is not None else Environment())


class EvaluatorTestCase(unittest.TestCase):

    def assertEvaluates(self, cases):
        for source, expected in cases.items():
            if isinstance(expected, bool):
                self.assertIs(TRUE if expected else FALSE, run(source), source)
            elif isinstance(expected, int):
                self.assertEqual(Integer(expected), run(source), source)
            elif isinstance(expected, str):
                self.assertEqual(String(expected), run(source), source)
            elif expected is None:
                self.assertIs(NULL, run(source), source)
            else:
                self.assertEqual(expected, run(source), source)

    def test_integer_expressions(self):
        self.assertEvaluates({
            "5": 5,
            "10": 10,
            "-5": -5,
            "-10": -10,
            "5 + 5 + 5 + 5 - 10": 10,
            "2 * 2 * 2 * 2 * 2": 32,
            "-50 + 100 + -50": 0,
            "5 * 2 + 10": 20,
            "5 + 2 * 10": 25,
            "5 + 5 * 2": 15,
            "(5 + 5) * 2": 20,
            "20 + 2 * -10": 0,
            "50 / 2 * 2 + 10": 60,
            "2 * (5 + 10)": 30,
            "3 * 3 * 3 + 10": 37,
            "3 * (3 * 3) + 10": 37,
            "(5 + 10 * 2 + 15 / 3) * 2 + -10": 50,
        })

    def test_integer_division(self):
        self.assertEvaluates({
            "7 / 2": 3,
            "-7 / 2": -3,
            "7 / -2": -3,
            "-7 / -2": 3,
            "0 / 5": 0,
            "1 / 0": Error("division by zero"),
            "let f = fn(x) { 10 / x }; f(0); 99": Error("division by zero"),
        })

    def test_integer_overflow_wraps(self):
        self.assertEvaluates({
            "9223372036854775807 + 1": -9223372036854775808,
            "-9223372036854775807 - 2": 9223372036854775807,
            "9223372036854775807 * 2": -2,
        })
        self.assertEqual(-2 ** 63, wrap_int64(2 ** 63))
        self.assertEqual(5, wrap_int64(5))

    def test_boolean_expressions(self):
        self.assertEvaluates({
            "true": True,
            "false": False,
            "1 < 2": True,
            "1 > 2": False,
            "1 < 1": False,
            "1 == 1": True,
            "1 != 1": False,
            "1 == 2": False,
            "1 != 2": True,
            "true == true": True,
            "false == false": True,
            "true == false": False,
            "true != false": True,
            "(1 < 2) == true": True,
            "1 < 2 == true": True,
            "(1 > 2) == true": False,
            "null == null": True,
            "null != null": False,
            "null == false": False,
            "5 == true": False,
            "5 != true": True,
            '"a" == "a"': True,
            '"a" != "a"': False,
            '"a" == "b"': False,
            '1 == "1"': False,
            "[1] == [1]": False,
            "let a = [1]; a == a": True,
        })

    def test_bang_operator(self):
        self.assertEvaluates({
            "!true": False,
            "!false": True,
            "!5": False,
            "!0": False,
            "!!true": True,
            "!!false": False,
            "!!5": True,
            "!null": True,
            '!""': False,
        })

    def test_truthiness(self):
        should_pass = [TRUE, Integer(0), String(""), Array([])]
        for obj in should_pass:
            self.assertTrue(is_truthy(obj), obj)

        should_fail = [FALSE, NULL]
        for obj in should_fail:
            self.assertFalse(is_truthy(obj), obj)

    def test_string_expressions(self):
        self.assertEvaluates({
            '"Hello World!"': "Hello World!",
            '"Hello" + " " + "World!"': "Hello World!",
            '""': "",
        })

    def test_if_else_expressions(self):
        self.assertEvaluates({
            "if (true) { 10 }": 10,
            "if (false) { 10 }": None,
            "if (1) { 10 }": 10,
            "if (0) { 10 }": 10,
            "if (null) { 10 }": None,
            "if (1 < 2) { 10 }": 10,
            "if (1 > 2) { 10 }": None,
            "if (1 > 2) { 10 } else { 20 }": 20,
            "if (1 < 2) { 10 } else { 20 }": 10,
            "if (true) { }": None,
        })

    def test_null_literal(self):
        self.assertIs(NULL, run("null"))
        self.assertIs(NULL, run(""))
        self.assertIs(NULL, run("let x = 1;"))

    def test_return_statements(self):
        self.assertEvaluates({
            "return 10;": 10,
            "return 10; 9;": 10,
            "return 2 * 5; 9;": 10,
            "9; return 2 * 5; 9;": 10,
            """
            if (10 > 1) {
                if (10 > 1) {
                    return 10;
                }
                return 1;
            }
            """: 10,
            """
            let f = fn(x) {
                return x;
                x + 10;
            };
            f(10);
            """: 10,
            """
            let f = fn(x) {
                let result = x + 10;
                return result;
                return 10;
            };
            f(10);
            """: 20,
        })

    def test_return_does_not_leak_from_function(self):
        self.assertEvaluates({
            "let f = fn() { return 1; }; f(); 2": 2,
            "let f = fn() { if (true) { return 1; } 5 }; f() + 10": 11,
            "let g = fn() { 7 }; g()": 7,
        })

    def test_error_handling(self):
        self.assertEvaluates({
            "5 + true;": Error("type mismatch: INTEGER + BOOLEAN"),
            "5 + true; 5;": Error("type mismatch: INTEGER + BOOLEAN"),
            "-true": Error("unknown operator: -BOOLEAN"),
            '-"a"': Error("unknown operator: -STRING"),
            "true + false;": Error("unknown operator: BOOLEAN + BOOLEAN"),
            "5; true + false; 5": Error("unknown operator: BOOLEAN + BOOLEAN"),
            "if (10 > 1) { true + false; }": Error("unknown operator: BOOLEAN + BOOLEAN"),
            """
            if (10 > 1) {
                if (10 > 1) {
                    return true + false;
                }
                return 1;
            }
            """: Error("unknown operator: BOOLEAN + BOOLEAN"),
            "foobar": Error("identifier not found: foobar"),
            '"Hello" - "World"': Error("unknown operator: STRING - STRING"),
            '"a" < "b"': Error("unknown operator: STRING < STRING"),
            "true < false": Error("unknown operator: BOOLEAN < BOOLEAN"),
            '{"name": "Monkey"}[fn(x) { x }];': Error("unusable as hash key: FUNCTION"),
            "{[1]: 2}": Error("unusable as hash key: ARRAY"),
            "1[0]": Error("index operator not supported: INTEGER"),
            "[1, 2][true]": Error("index operator not supported: ARRAY"),
            "let x = foo; 5": Error("identifier not found: foo"),
            "-foo + 1": Error("identifier not found: foo"),
            "1 + -foo": Error("identifier not found: foo"),
            "if (foo) { 1 }": Error("identifier not found: foo"),
            "[1, foo, bar]": Error("identifier not found: foo"),
            "{foo: 1}": Error("identifier not found: foo"),
            "{1: foo}": Error("identifier not found: foo"),
            "return foo; 1": Error("identifier not found: foo"),
        })

    def test_error_aborts_function_body(self):
        source = """
        let f = fn(x) {
            if (x > 0) {
                if (true) { x + true; }
                print("unreachable");
            }
            999;
        };
        f(1);
        1000;
        """
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(Error("type mismatch: INTEGER + BOOLEAN"), run(source))
        self.assertEqual("", out.getvalue())

    def test_let_statements(self):
        self.assertEvaluates({
            "let a = 5; a;": 5,
            "let a = 5 * 5; a;": 25,
            "let a = 5; let b = a; b;": 5,
            "let a = 5; let b = a; let c = a + b + 5; c;": 15,
            "let a = 1; let a = a + 1; a": 2,
        })

    def test_function_object(self):
        env = Environment()
        function = run("fn(x) { x + 2; };", env)

        self.assertIsInstance(function, Function)
        self.assertEqual(["x"], [param.name for param in function.parameters])
        self.assertEqual("{ (x + 2) }", str(function.body))
        self.assertIs(env, function.env)

    def test_function_application(self):
        self.assertEvaluates({
            "let identity = fn(x) { x; }; identity(5);": 5,
            "let identity = fn(x) { return x; }; identity(5);": 5,
            "let double = fn(x) { x * 2; }; double(5);": 10,
            "let add = fn(x, y) { x + y; }; add(5, 5);": 10,
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": 20,
            "fn(x) { x; }(5)": 5,
            "let noop = fn() { }; noop()": None,
            """
            let fib = fn(n) {
                if (n < 2) { return n; }
                fib(n - 1) + fib(n - 2)
            };
            fib(15)
            """: 610,
        })

    def test_function_arity(self):
        self.assertEvaluates({
            "fn(x, y) { x }(1)": Error("wrong number of arguments: want=2, got=1"),
            "fn() { 1 }(1, 2)": Error("wrong number of arguments: want=0, got=2"),
            "5(1)": Error("not a function: INTEGER"),
            '"f"()': Error("not a function: STRING"),
            "fn(x) { x }(foo)": Error("identifier not found: foo"),
            "foo(1)": Error("identifier not found: foo"),
        })

    def test_closures(self):
        self.assertEvaluates({
            "let newAdder = fn(x) { fn(y) { x + y; } }; let addTwo = newAdder(2); addTwo(3);": 5,
            """
            let counter = fn(x) {
                if (x > 50) { return x; }
                counter(x + 1);
            };
            counter(0);
            """: 51,
            """
            let x = 10;
            let shadow = fn(x) { x };
            shadow(1) + x
            """: 11,
            """
            let make = fn() { let secret = 42; fn() { secret } };
            let get = make();
            get()
            """: 42,
        })

    def test_closure_sees_later_bindings(self):
        self.assertEvaluates({
            "let f = fn() { later }; let later = 3; f()": 3,
        })

    def test_builtin_functions(self):
        self.assertEvaluates({
            'len("")': 0,
            'len("four")': 4,
            'len("hello world")': 11,
            "len([1, 2, 3])": 3,
            "len(1)": Error("argument to `len` not supported, got INTEGER"),
            'len("one", "two")': Error("wrong number of arguments. got=2, want=1"),
            "first([1, 2, 3])": 1,
            "first([])": None,
            "last([1, 2, 3])": 3,
            "last([])": None,
            "rest([1, 2, 3])": Array([Integer(2), Integer(3)]),
            "rest([])": None,
            "push([], 1)": Array([Integer(1)]),
            "first(1)": Error("argument to `first` must be ARRAY, got INTEGER"),
            "push(1, 1)": Error("argument to `push` must be ARRAY, got INTEGER"),
            "let len = fn(x) { 42 }; len([])": 42,
        })

    def test_print(self):
        out = io.StringIO()
        with redirect_stdout(out):
            result = run('print("a", 1, [true, null]); print(); let x = print("done"); x')
        self.assertIs(NULL, result)
        self.assertEqual("a 1 [true, null]\n\ndone\n", out.getvalue())

    def test_array_literals(self):
        self.assertEqual(Array([Integer(1), Integer(4), Integer(6)]), run("[1, 2 * 2, 3 + 3]"))
        self.assertEqual(Array([]), run("[]"))

    def test_array_index_expressions(self):
        self.assertEvaluates({
            "[1, 2, 3][0]": 1,
            "[1, 2, 3][1]": 2,
            "[1, 2, 3][2]": 3,
            "let i = 0; [1][i];": 1,
            "[1, 2, 3][1 + 1];": 3,
            "let myArray = [1, 2, 3]; myArray[2];": 3,
            "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];": 6,
            "let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]": 2,
            "[1, 2, 3][3]": None,
            "[1, 2, 3][-1]": None,
            "[][0]": None,
        })

    def test_collection_properties(self):
        arrays = ["[]", "[1]", "[1, 2]", '[1, "two", true, [3]]']
        for array in arrays:
            env = Environment()
            run(f"let a = {array}; let before = len(a); let b = push(a, 99);", env)

            self.assertEqual(Integer(env.get("before").value + 1), run("len(b)", env), array)
            self.assertEqual(run(array), run("a", env), array)
            self.assertIs(TRUE, run("len(a) == before", env), array)
            self.assertIs(NULL, run("a[len(a)]", env), array)

            if env.get("before").value >= 2:
                self.assertEqual(run("a[1]", env), run("first(rest(a))", env), array)

    def test_hash_literals(self):
        source = """
        let two = "two";
        {
            "one": 10 - 9,
            two: 1 + 1,
            "thr" + "ee": 6 / 2,
            4: 4,
            true: 5,
            false: 6
        }
        """
        result = run(source)
        self.assertIsInstance(result, Hash)

        expected = {
            String("one").hash_key(): 1,
            String("two").hash_key(): 2,
            String("three").hash_key(): 3,
            Integer(4).hash_key(): 4,
            TRUE.hash_key(): 5,
            FALSE.hash_key(): 6,
        }
        self.assertEqual(len(expected), len(result.pairs))
        for key, value in expected.items():
            self.assertEqual(Integer(value), result.pairs[key].value, key)

    def test_hash_literal_duplicate_keys(self):
        result = run('{"a": 1, "a": 2}')
        self.assertEqual(1, len(result.pairs))
        self.assertEqual("{a: 2}", result.inspect())

    def test_hash_index_expressions(self):
        self.assertEvaluates({
            '{"foo": 5}["foo"]': 5,
            '{"foo": 5}["bar"]': None,
            'let key = "foo"; {"foo": 5}[key]': 5,
            '{}["foo"]': None,
            "{5: 5}[5]": 5,
            "{true: 5}[true]": 5,
            "{false: 5}[false]": 5,
            "{1: 5}[true]": None,
            "{true: 5}[1]": None,
            '{"1": 5}[1]': None,
            '{"k": 1}[[]]': Error("unusable as hash key: ARRAY"),
        })


if __name__ == '__main__':
    unittest.main()
