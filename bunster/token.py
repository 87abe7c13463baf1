"""Token kinds and tokens produced when scanning shell scripts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto


class TokenType(IntEnum):
    """Every kind of token the scanner can produce."""

    IF = auto()
    THEN = auto()
    ELSE = auto()
    ELIF = auto()
    FI = auto()
    FOR = auto()
    IN = auto()
    DO = auto()
    DONE = auto()
    WHILE = auto()
    UNTIL = auto()
    CASE = auto()
    ESAC = auto()
    FUNCTION = auto()
    TEST = auto()
    SELECT = auto()
    TRAP = auto()
    RETURN = auto()
    EXIT = auto()
    BREAK = auto()
    CONTINUE = auto()
    DECLARE = auto()
    LOCAL = auto()
    EXPORT = auto()
    READONLY = auto()
    UNSET = auto()
    WAIT = auto()
    EMBED = auto()
    DEFER = auto()
    LET = auto()

    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    EXPONENTIATION = auto()  # **
    SLASH = auto()  # /
    PERCENT = auto()  # %
    PERCENT_ASSIGN = auto()  # %=
    DOUBLE_PERCENT = auto()  # %%
    ASSIGN = auto()  # =
    PLUS_ASSIGN = auto()  # +=
    MINUS_ASSIGN = auto()  # -=
    STAR_ASSIGN = auto()  # *=
    SLASH_ASSIGN = auto()  # /=
    EQ = auto()  # ==
    NOT_EQ = auto()  # !=
    LT = auto()  # <
    GT = auto()  # >
    GT_EQ = auto()  # >=
    LT_EQ = auto()  # <=
    EQ_TILDE = auto()  # =~
    AND = auto()  # &&
    OR = auto()  # ||
    PIPE = auto()  # |
    PIPE_ASSIGN = auto()  # |=
    AMPERSAND = auto()  # &
    AMPERSAND_ASSIGN = auto()  # &=
    DOUBLE_GT = auto()  # >>
    DOUBLE_GT_ASSIGN = auto()  # >>=
    DOUBLE_LT = auto()  # <<
    DOUBLE_LT_ASSIGN = auto()  # <<=
    DOUBLE_LT_MINUS = auto()  # <<-
    TRIPLE_LT = auto()  # <<<
    GT_AMPERSAND = auto()  # >&
    LT_AMPERSAND = auto()  # <&
    PIPE_AMPERSAND = auto()  # |&
    AMPERSAND_GT = auto()  # &>
    AMPERSAND_DOUBLE_GT = auto()  # &>>
    GT_PIPE = auto()  # >|
    LT_GT = auto()  # <>
    SEMICOLON = auto()  # ;
    LEFT_PAREN = auto()  # (
    RIGHT_PAREN = auto()  # )
    DOUBLE_LEFT_PAREN = auto()  # ((
    LEFT_BRACKET = auto()  # [
    RIGHT_BRACKET = auto()  # ]
    DOUBLE_LEFT_BRACKET = auto()  # [[
    DOUBLE_RIGHT_BRACKET = auto()  # ]]
    LEFT_BRACE = auto()  # {
    RIGHT_BRACE = auto()  # }
    COMMA = auto()  # ,
    DOUBLE_COMMA = auto()  # ,,
    COLON = auto()  # :
    BACKSLASH = auto()  # \
    DOUBLE_QUOTE = auto()  # "
    SINGLE_QUOTE = auto()  # '
    QUESTION = auto()  # ?
    EXCLAMATION = auto()  # !
    HASH = auto()  # #
    DOLLAR_BRACE = auto()  # ${
    DOLLAR_PAREN = auto()  # $(
    DOLLAR_DOUBLE_PAREN = auto()  # $((
    GT_PAREN = auto()  # >(
    LT_PAREN = auto()  # <(
    CIRCUMFLEX = auto()  # ^
    DOUBLE_CIRCUMFLEX = auto()  # ^^
    CIRCUMFLEX_ASSIGN = auto()  # ^=
    COLON_ASSIGN = auto()  # :=
    COLON_MINUS = auto()  # :-
    COLON_PLUS = auto()  # :+
    COLON_QUESTION = auto()  # :?
    DOUBLE_DOT = auto()  # ..
    INCREMENT = auto()  # ++
    DECREMENT = auto()  # --
    TILDE = auto()  # ~
    AT = auto()  # @

    SIMPLE_EXPANSION = auto()  # $name
    ESCAPED_CHAR = auto()  # a character preceded by a backslash
    WORD = auto()  # identifiers and plain words
    INT = auto()
    FLOAT = auto()
    BLANK = auto()  # spaces and tabs
    NEWLINE = auto()
    SPECIAL_VAR = auto()  # $?, $#, $@, $*, $$, $!, $0, $1, ...
    OTHER = auto()
    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "elif": TokenType.ELIF,
    "fi": TokenType.FI,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "do": TokenType.DO,
    "done": TokenType.DONE,
    "while": TokenType.WHILE,
    "until": TokenType.UNTIL,
    "case": TokenType.CASE,
    "esac": TokenType.ESAC,
    "function": TokenType.FUNCTION,
    "test": TokenType.TEST,
    "select": TokenType.SELECT,
    "trap": TokenType.TRAP,
    "return": TokenType.RETURN,
    "exit": TokenType.EXIT,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "declare": TokenType.DECLARE,
    "local": TokenType.LOCAL,
    "export": TokenType.EXPORT,
    "readonly": TokenType.READONLY,
    "unset": TokenType.UNSET,
    "wait": TokenType.WAIT,
    "embed": TokenType.EMBED,
    "defer": TokenType.DEFER,
    "let": TokenType.LET,
}


def lookup_keyword(word: str) -> TokenType | None:
    """Return the keyword token type for ``word``, or None if it is not a keyword."""
    return KEYWORDS.get(word)


@dataclass(frozen=True)
class Token:
    """A single scanned token with its source position."""

    type: TokenType
    line: int = 0
    position: int = 0
    literal: str = ""

    def __str__(self) -> str:
        if self.type is TokenType.NEWLINE:
            return "newline"
        if self.type is TokenType.EOF:
            return "end of file"
        if self.type is TokenType.BLANK:
            return "blank"
        if self.type is TokenType.ESCAPED_CHAR:
            return "\\" + self.literal
        if self.type in (TokenType.SIMPLE_EXPANSION, TokenType.SPECIAL_VAR):
            return "$" + self.literal
        return self.literal