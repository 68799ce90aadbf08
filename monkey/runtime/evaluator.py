"""Tree-walking evaluator for the Monkey language.

evaluate(node, env) is the single entry point: it matches on the node type and recurses. Control flow that leaves a
block early (`return` and runtime errors) is carried by ReturnValue and Error objects, which every block, call and
program checks after each step. Host exceptions are never used for language-level errors.

Recursion is bounded by the Python call stack, so runaway recursion in a Monkey program surfaces as RecursionError.
That is a host-level failure, handled by lang.error.ErrorHandler, not an Error object.
"""

from monkey.syntax import ast
from monkey.runtime.builtins import BUILTINS
from monkey.runtime.environment import Environment
from monkey.runtime.object import (
    FALSE, NULL, TRUE, Array, Builtin, Error, Function, Hash, Hashable, HashPair, Integer, ReturnValue, String,
    is_error, native_bool
)


INT64_MIN = -2 ** 63
UINT64 = 2 ** 64


def wrap_int64(value):
    """Wraps value into the signed 64-bit range (two's complement overflow)."""
    return (value - INT64_MIN) % UINT64 + INT64_MIN


def is_truthy(obj):
    """false and null are falsy, every other value (0 and "" included) is truthy."""
    return obj is not FALSE and obj is not NULL


def evaluate(node, env):
    """Evaluates node in env and returns an Object."""
    # statements
    if isinstance(node, ast.Program):
        return eval_program(node, env)

    if isinstance(node, ast.BlockStatement):
        return eval_block_statement(node, env)

    if isinstance(node, ast.ExpressionStatement):
        return evaluate(node.expression, env)

    if isinstance(node, ast.LetStatement):
        value = evaluate(node.value, env)
        if is_error(value):
            return value
        env.set(node.name.name, value)
        return NULL

    if isinstance(node, ast.ReturnStatement):
        value = evaluate(node.value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    # literals
    if isinstance(node, ast.IntegerLiteral):
        return Integer(node.value)

    if isinstance(node, ast.StringLiteral):
        return String(node.value)

    if isinstance(node, ast.BooleanLiteral):
        return native_bool(node.value)

    if isinstance(node, ast.NullLiteral):
        return NULL

    # expressions
    if isinstance(node, ast.Identifier):
        return eval_identifier(node, env)

    if isinstance(node, ast.PrefixExpression):
        operand = evaluate(node.operand, env)
        if is_error(operand):
            return operand
        return eval_prefix_expression(node.operator, operand)

    if isinstance(node, ast.InfixExpression):
        left = evaluate(node.left, env)
        if is_error(left):
            return left
        right = evaluate(node.right, env)
        if is_error(right):
            return right
        return eval_infix_expression(node.operator, left, right)

    if isinstance(node, ast.IfExpression):
        return eval_if_expression(node, env)

    if isinstance(node, ast.FunctionLiteral):
        return Function(node.parameters, node.body, env)

    if isinstance(node, ast.CallExpression):
        function = evaluate(node.callee, env)
        if is_error(function):
            return function

        args = eval_expressions(node.arguments, env)
        if is_error(args):
            return args
        return apply_function(function, args)

    if isinstance(node, ast.ArrayLiteral):
        elements = eval_expressions(node.elements, env)
        if is_error(elements):
            return elements
        return Array(elements)

    if isinstance(node, ast.IndexExpression):
        collection = evaluate(node.collection, env)
        if is_error(collection):
            return collection
        index = evaluate(node.index, env)
        if is_error(index):
            return index
        return eval_index_expression(collection, index)

    if isinstance(node, ast.HashLiteral):
        return eval_hash_literal(node, env)

    raise TypeError(f"cannot evaluate {type(node).__name__}")


def eval_program(program, env):
    result = NULL
    for stmt in program.statements:
        result = evaluate(stmt, env)

        if isinstance(result, ReturnValue):
            return result.value
        if is_error(result):
            return result
    return result


def eval_block_statement(block, env):
    """Like eval_program, but a ReturnValue is passed up still wrapped so that it can leave enclosing blocks."""
    result = NULL
    for stmt in block.statements:
        result = evaluate(stmt, env)

        if isinstance(result, ReturnValue) or is_error(result):
            return result
    return result


def eval_expressions(expressions, env):
    """Evaluates expressions left to right. Returns the list of results, or the first Error encountered."""
    results = []
    for expression in expressions:
        evaluated = evaluate(expression, env)
        if is_error(evaluated):
            return evaluated
        results.append(evaluated)
    return results


def eval_identifier(node, env):
    value = env.get(node.name)
    if value is not None:
        return value

    builtin = BUILTINS.get(node.name)
    if builtin is not None:
        return builtin

    return Error(f"identifier not found: {node.name}")


def eval_prefix_expression(operator, operand):
    if operator == "!":
        return FALSE if is_truthy(operand) else TRUE

    if operator == "-":
        if not isinstance(operand, Integer):
            return Error(f"unknown operator: -{operand.type}")
        return Integer(wrap_int64(-operand.value))

    return Error(f"unknown operator: {operator}{operand.type}")


def eval_infix_expression(operator, left, right):
    if isinstance(left, Integer) and isinstance(right, Integer):
        return eval_integer_infix_expression(operator, left, right)

    if isinstance(left, String) and isinstance(right, String):
        return eval_string_infix_expression(operator, left, right)

    # booleans and null are singletons, so identity is equality for them
    if operator == "==":
        return native_bool(left is right)
    if operator == "!=":
        return native_bool(left is not right)

    if left.type != right.type:
        return Error(f"type mismatch: {left.type} {operator} {right.type}")
    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_integer_infix_expression(operator, left, right):
    left_val, right_val = left.value, right.value

    if operator == "+":
        return Integer(wrap_int64(left_val + right_val))
    if operator == "-":
        return Integer(wrap_int64(left_val - right_val))
    if operator == "*":
        return Integer(wrap_int64(left_val * right_val))
    if operator == "/":
        if right_val == 0:
            return Error("division by zero")
        quotient = abs(left_val) // abs(right_val)  # truncates toward zero
        if (left_val < 0) != (right_val < 0):
            quotient = -quotient
        return Integer(wrap_int64(quotient))
    if operator == "<":
        return native_bool(left_val < right_val)
    if operator == ">":
        return native_bool(left_val > right_val)
    if operator == "==":
        return native_bool(left_val == right_val)
    if operator == "!=":
        return native_bool(left_val != right_val)

    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_string_infix_expression(operator, left, right):
    if operator == "+":
        return String(left.value + right.value)
    if operator == "==":
        return native_bool(left.value == right.value)
    if operator == "!=":
        return native_bool(left.value != right.value)

    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_if_expression(node, env):
    condition = evaluate(node.condition, env)
    if is_error(condition):
        return condition

    if is_truthy(condition):
        return evaluate(node.consequence, env)
    if node.alternative is not None:
        return evaluate(node.alternative, env)
    return NULL


def apply_function(function, args):
    if isinstance(function, Function):
        if len(args) != len(function.parameters):
            return Error(f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}")

        call_env = Environment.enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            call_env.set(param.name, arg)

        result = evaluate(function.body, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    if isinstance(function, Builtin):
        return function.fn(*args)

    return Error(f"not a function: {function.type}")


def eval_index_expression(collection, index):
    if isinstance(collection, Array) and isinstance(index, Integer):
        elements = collection.elements
        if index.value < 0 or index.value >= len(elements):
            return NULL
        return elements[index.value]

    if isinstance(collection, Hash):
        if not isinstance(index, Hashable):
            return Error(f"unusable as hash key: {index.type}")
        pair = collection.pairs.get(index.hash_key())
        return pair.value if pair is not None else NULL

    return Error(f"index operator not supported: {collection.type}")


def eval_hash_literal(node, env):
    pairs = {}
    for key_node, value_node in node.pairs:
        key = evaluate(key_node, env)
        if is_error(key):
            return key
        if not isinstance(key, Hashable):
            return Error(f"unusable as hash key: {key.type}")

        value = evaluate(value_node, env)
        if is_error(value):
            return value

        pairs[key.hash_key()] = HashPair(key, value)

    return Hash(pairs)
