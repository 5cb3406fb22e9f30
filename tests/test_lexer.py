from activityquery.lexer import Span, Token, TokenKind, tokenize


def kinds(text):
    return [tok.kind for tok in tokenize(text)]


def test_simple_statement():
    assert kinds("return 1;") == [TokenKind.RETURN, TokenKind.NUMBER, TokenKind.SEMI]


def test_escaped_quote_in_string():
    tokens = list(tokenize('"test \\" with escaped quote"'))
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.STRING
    assert tokens[0].value == 'test " with escaped quote'


def test_two_strings_stay_separate():
    tokens = list(tokenize('"a"+"b"'))
    assert [t.kind for t in tokens] == [TokenKind.STRING, TokenKind.PLUS, TokenKind.STRING]
    assert [tokens[0].value, tokens[2].value] == ["a", "b"]


def test_numbers():
    values = [tok.value for tok in tokenize("1 1. 1.1")]
    assert values == [1.0, 1.0, 1.1]


def test_bool_spellings():
    values = [tok.value for tok in tokenize("true false True False")]
    assert values == [True, False, True, False]
    assert all(k is TokenKind.BOOL for k in kinds("true False"))


def test_keywords_and_identifiers():
    assert kinds("if elif else return") == [
        TokenKind.IF,
        TokenKind.ELIF,
        TokenKind.ELSE,
        TokenKind.RETURN,
    ]
    tokens = list(tokenize("iffy returns _x1"))
    assert [t.kind for t in tokens] == [TokenKind.IDENT] * 3
    assert [t.value for t in tokens] == ["iffy", "returns", "_x1"]


def test_equals_versus_assign():
    assert kinds("a==b=c") == [
        TokenKind.IDENT,
        TokenKind.EQUALS,
        TokenKind.IDENT,
        TokenKind.ASSIGN,
        TokenKind.IDENT,
    ]


def test_punctuation():
    assert kinds("+-*/%()[]{},:;") == [
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.STAR,
        TokenKind.SLASH,
        TokenKind.PERCENT,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.SEMI,
    ]


def test_comment_skipped():
    assert kinds("return 1;# testing 123") == [
        TokenKind.RETURN,
        TokenKind.NUMBER,
        TokenKind.SEMI,
    ]


def test_spans_cover_token_text():
    text = "foo = 12;"
    tokens = list(tokenize(text))
    assert [text[t.span.lo : t.span.hi] for t in tokens] == ["foo", "=", "12", ";"]


def test_line_numbers():
    tokens = list(tokenize("a\n\nb"))
    assert tokens[0].span.line == 1
    assert tokens[1].span.line == 3


def test_stops_at_unknown_character():
    tokens = list(tokenize("a @ b"))
    assert tokens == [Token(TokenKind.IDENT, "a", Span(0, 1, 1))]


def test_unterminated_string_stops():
    assert kinds('a "abc') == [TokenKind.IDENT]