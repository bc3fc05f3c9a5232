from Calculator import Lexer, Registry
from Calculator.Tokens import Location, split_arguments


def test_location_size_and_span():
    first = Location(2, 3)
    last = Location(6, 9)
    assert first.size() == 1
    assert first.span(last) == Location(2, 9)


def test_resolve_returns_a_new_token():
    token = Lexer.tokenize("+")[0]
    resolved = token.resolve(operator=Registry.find_operator("+", 2))
    assert resolved is not token
    assert not token.resolved
    assert resolved.resolved
    assert resolved.location == token.location


def test_split_arguments():
    tokens = Lexer.tokenize("f(1, (2, 3), 4)")
    ranges, close_index = split_arguments(tokens, 1)
    assert close_index == len(tokens) - 1
    assert [[token.text for token in tokens[start:end]] for start, end in ranges] == [
        ["1"], ["(", "2", ",", "3", ")"], ["4"],
    ]


def test_split_arguments_empty_call():
    tokens = Lexer.tokenize("rand()")
    assert split_arguments(tokens, 1) == ([], 2)


def test_split_arguments_dangling_comma():
    tokens = Lexer.tokenize("max(1,)")
    ranges, _ = split_arguments(tokens, 1)
    assert ranges == [(2, 3), (4, 4)]


def test_split_arguments_unclosed():
    tokens = Lexer.tokenize("max(1, 2")
    _, close_index = split_arguments(tokens, 1)
    assert close_index is None
