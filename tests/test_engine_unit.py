import pytest

from riestex import engine
from riestex.engine import Node, NodeKind, TokenKind
from riestex.errors import (
    ExpressionTooDeepError,
    InsufficientOperandsError,
    InvalidExpressionError,
    UnknownNodeTypeError,
    UnknownOperatorError,
    UnknownTokenError,
)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("pi", r"\pi"),
        ("p", r"\pi"),
        ("phi", r"\phi"),
        ("e", "e"),
        ("a", "a"),
        ("b", "b"),
        ("x", "x"),
        ("y", "y"),
    ],
)
def test_constants_render_as_their_symbol(token: str, expected: str) -> None:
    assert engine.tokens_to_latex(token) == expected


@pytest.mark.parametrize(
    "token,kind",
    [
        ("12", TokenKind.NUMBER),
        ("-3.5", TokenKind.NUMBER),
        (".25", TokenKind.NUMBER),
        ("7.", TokenKind.NUMBER),
        ("1/9", TokenKind.NUMBER),
        ("-2/3", TokenKind.NUMBER),
        ("z", TokenKind.VARIABLE),
        ("k", TokenKind.VARIABLE),
        ("x", TokenKind.CONSTANT),
        ("phi", TokenKind.CONSTANT),
        ("sinpi", TokenKind.UNARY),
        ("q", TokenKind.UNARY),
        ("**", TokenKind.BINARY),
        ("logN", TokenKind.BINARY),
    ],
)
def test_classify_token(token: str, kind: TokenKind) -> None:
    assert engine.classify_token(token) is kind


def test_classify_unknown_token() -> None:
    with pytest.raises(UnknownTokenError) as exc:
        engine.classify_token("foo")
    assert exc.value.token == "foo"


def test_tokenize_expands_dup_square() -> None:
    assert engine.tokenize("x dup*") == ["x", "2", "**"]
    assert engine.tokenize("  8 dup*  5 + ") == ["8", "2", "**", "5", "+"]


@pytest.mark.parametrize(
    "tokens,expected",
    [
        ("x 2 ^", "x^{2}"),
        ("x dup*", "x^{2}"),
        ("8 dup* 5 +", "8^{2} + 5"),
        ("phi 2 ^", r"\phi^{2}"),
        ("phi -1 ^", r"\phi^{-1}"),
        ("phi 1/2 ^", r"\phi^{1/2}"),
        ("1 x phi + /", r"\frac{1}{x + \phi}"),
        ("x 1 + 2 /", r"\frac{x + 1}{2}"),
        ("a b atan2", r"\operatorname{atan2}(a,b)"),
        ("e 1/8 atan2", r"\operatorname{atan2}(e,1/8)"),
        ("a b + c atan2", r"\operatorname{atan2}(a + b,c)"),
        ("x 2 logN", r"\log_{2}(x)"),
        ("x 1 + 2 logN", r"\log_{2}(x + 1)"),
    ],
)
def test_basic_rendering(tokens: str, expected: str) -> None:
    assert engine.tokens_to_latex(tokens) == expected


@pytest.mark.parametrize(
    "tokens,expected",
    [
        ("x q", r"\sqrt{x}"),
        ("x sqrt", r"\sqrt{x}"),
        ("x l", r"\ln(x)"),
        ("x ln", r"\ln(x)"),
        ("x 1 + ln", r"\ln(x + 1)"),
        ("x s", r"\sin(x)"),
        ("x r", r"\frac{1}{x}"),
        ("x recip", r"\frac{1}{x}"),
        ("x log2", r"\log_{2}(x)"),
        ("x exp", "e^{x}"),
        ("x neg", "-x"),
        ("x y + neg", "-(x + y)"),
        ("x y - neg", "-(x - y)"),
    ],
)
def test_unary_rendering(tokens: str, expected: str) -> None:
    assert engine.tokens_to_latex(tokens) == expected


class TestTrigPi:
    def test_simple_fraction_keeps_denominator_only(self):
        assert engine.tokens_to_latex("1/9 cospi") == r"\cos\bigl(\frac{\pi}{9}\bigr)"
        assert engine.tokens_to_latex("2/7 sinpi") == r"\sin\bigl(\frac{\pi}{7}\bigr)"

    def test_general_argument(self):
        assert engine.tokens_to_latex("x tanpi") == r"\tan\bigl(\pi x\bigr)"

    def test_nested(self):
        assert engine.tokens_to_latex("x sinpi sinpi") == (
            r"\sin\bigl(\pi \sin\bigl(\pi x\bigr)\bigr)"
        )


class TestExponentiation:
    def test_additive_base_is_bracketed_once(self):
        assert engine.tokens_to_latex("x 1 + 2 ^") == "(x + 1)^{2}"

    def test_product_base_is_bracketed(self):
        assert engine.tokens_to_latex("x y * 2 ^") == "(x y)^{2}"

    def test_fraction_base_is_bracketed(self):
        assert engine.tokens_to_latex("x y / 2 ^") == r"(\frac{x}{y})^{2}"

    def test_unary_bases(self):
        assert engine.tokens_to_latex("x neg 2 ^") == "(-x)^{2}"
        assert engine.tokens_to_latex("x exp 2 ^") == "(e^{x})^{2}"
        assert engine.tokens_to_latex("x q 2 ^") == r"\sqrt{x}^{2}"

    def test_nested_powers(self):
        assert engine.tokens_to_latex("x 2 ^ 3 ^") == "(x^{2})^{3}"
        assert engine.tokens_to_latex("x 2 ** 3 **") == "(x^{2})^{3}"

    def test_negative_literal_base_stays_bare(self):
        assert engine.tokens_to_latex("-2 2 ^") == "-2^{2}"

    def test_subtraction_inside_power_keeps_grouping(self):
        assert engine.tokens_to_latex("a b c + - 2 ^") == "(a - (b + c))^{2}"

    @pytest.mark.parametrize(
        "tokens,expected",
        [
            ("x 1 3 / ^", "x^{1/3}"),
            ("x 10 3 / ^", "x^{10/3}"),
            ("x 123 45 / ^", "x^{123/45}"),
            ("x -12 345 / ^", "x^{-12/345}"),
            ("x pi 2 / ^", r"x^{\frac{\pi}{2}}"),
            ("x 2 y + 3 / ^", r"x^{\frac{2 + y}{3}}"),
        ],
    )
    def test_fraction_exponents(self, tokens, expected):
        assert engine.tokens_to_latex(tokens) == expected


class TestRoot:
    def test_plain_base(self):
        assert engine.tokens_to_latex("x 3 root") == "x^{1/3}"

    def test_base_with_exponent(self):
        assert engine.tokens_to_latex("x 2 ^ 3 root") == "(x^{2})^{1/3}"

    def test_additive_base(self):
        assert engine.tokens_to_latex("x 1 + 3 root") == "(x + 1)^{1/3}"


class TestMultiplication:
    def test_two_literals_use_cdot(self):
        assert engine.tokens_to_latex("2 3 *") == r"2 \cdot 3"

    def test_integer_factor_moves_to_front(self):
        assert engine.tokens_to_latex("x 2 *") == "2 x"
        assert engine.tokens_to_latex("2 x *") == "2 x"

    def test_e_power_factor_moves_to_front(self):
        assert engine.tokens_to_latex("x 2 exp *") == "e^{2} x"

    def test_implicit_multiplication(self):
        assert engine.tokens_to_latex("x pi *") == r"x \pi"

    def test_additive_operands_are_bracketed(self):
        assert engine.tokens_to_latex("x y 1 + *") == "x (y + 1)"
        assert engine.tokens_to_latex("x 1 + y *") == "(x + 1) y"
        assert engine.tokens_to_latex("x 1 + 2 *") == "2 (x + 1)"


class TestAdditive:
    def test_subtraction_brackets_additive_right_operand(self):
        assert engine.tokens_to_latex("x y z + -") == "x - (y + z)"
        assert engine.tokens_to_latex("x y z - -") == "x - (y - z)"

    def test_subtraction_inside_function_still_brackets(self):
        assert engine.tokens_to_latex("x y z + - q") == r"\sqrt{x - (y + z)}"

    def test_left_associative_chains_stay_flat(self):
        assert engine.tokens_to_latex("x y z + +") == "x + y + z"
        assert engine.tokens_to_latex("x 1 - 1 +") == "x - 1 + 1"


class TestParserErrors:
    def test_lone_operator_underflows(self):
        with pytest.raises(InsufficientOperandsError) as exc:
            engine.tokens_to_latex("+")
        assert exc.value.operator == "+"
        assert exc.value.available == 0

    def test_unary_underflow(self):
        with pytest.raises(InsufficientOperandsError):
            engine.tokens_to_latex("neg")

    def test_binary_with_one_operand(self):
        with pytest.raises(InsufficientOperandsError):
            engine.tokens_to_latex("x *")

    def test_leftover_operands(self):
        with pytest.raises(InvalidExpressionError) as exc:
            engine.tokens_to_latex("x y")
        assert exc.value.stack_size == 2

    def test_empty_input(self):
        with pytest.raises(InvalidExpressionError):
            engine.tokens_to_latex("   ")

    def test_unknown_token(self):
        with pytest.raises(UnknownTokenError):
            engine.tokens_to_latex("x foo +")
        with pytest.raises(UnknownTokenError):
            engine.tokens_to_latex("X")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            engine.tokens_to_latex("x y")


def test_needs_parens_flag_is_set_at_construction() -> None:
    assert engine.parse_postfix(["x", "1", "+"]).needs_parens_when_exponentiated
    assert engine.parse_postfix(["x", "neg"]).needs_parens_when_exponentiated
    assert engine.parse_postfix(["x", "exp"]).needs_parens_when_exponentiated
    assert not engine.parse_postfix(["x", "q"]).needs_parens_when_exponentiated
    assert not engine.parse_postfix(["x", "y", "atan2"]).needs_parens_when_exponentiated
    assert not engine.parse_postfix(["x", "2", "logN"]).needs_parens_when_exponentiated
    assert not engine.parse_postfix(["3.5"]).needs_parens_when_exponentiated


def test_parse_builds_operands_in_stack_order() -> None:
    tree = engine.parse_postfix(engine.tokenize("a b -"))
    assert tree.kind is NodeKind.BINARY
    assert [c.value for c in tree.children] == ["a", "b"]


def test_render_rejects_inconsistent_trees() -> None:
    x = Node(NodeKind.VARIABLE, "x")
    with pytest.raises(UnknownOperatorError):
        engine.to_latex(Node(NodeKind.BINARY, "%", (x, x)))
    with pytest.raises(UnknownOperatorError):
        engine.to_latex(Node(NodeKind.UNARY, "cosh", (x,)))
    with pytest.raises(UnknownNodeTypeError):
        engine.to_latex(Node("matrix", "?"))


def test_conversion_is_stable() -> None:
    tokens = "x 1 + 2 ^ phi sinpi * 3 /"
    assert engine.tokens_to_latex(tokens) == engine.tokens_to_latex(tokens)
    assert engine.convert_forth_to_latex(tokens) == engine.tokens_to_latex(tokens)


def test_deeply_nested_expression_raises_render_error() -> None:
    tokens = "x" + " 1 +" * 5000
    with pytest.raises(ExpressionTooDeepError) as exc:
        engine.tokens_to_latex(tokens)
    assert exc.value.token_count == 10001
    assert isinstance(exc.value, ValueError)
