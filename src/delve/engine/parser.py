"""Fixed-grammar parser turning one line of input into a Command.

Grammar: VERB [OBJECT-PHRASE] [PREPOSITION [OBJECT-PHRASE]], plus bare
directions and "go <direction>". Object phrases resolve longest match
first. The only state kept between calls is the last resolved object,
which stands in for "it" and "them".
"""

import enum
from dataclasses import dataclass

from .vocabulary import MOVEMENT_VERB, Vocabulary

ARTICLES = frozenset(("the", "a", "an"))
PRONOUNS = frozenset(("it", "them"))
TRAILING_PUNCTUATION = ".,!?;:"

# Verbs whose argument is a file name, not a vocabulary word.
FREE_FORM_VERBS = frozenset(("save", "restore"))


@dataclass(frozen=True)
class Command:
    """A structured player intent."""

    verb: str
    direct_object: str | None = None
    preposition: str | None = None
    indirect_object: str | None = None
    direction: str | None = None
    raw: str = ""


class ParseFailure(enum.Enum):
    EMPTY = "empty"
    UNKNOWN_WORD = "unknown_word"
    UNEXPECTED_WORD = "unexpected_word"
    UNKNOWN_OBJECT = "unknown_object"


class ParseError(Exception):
    """Input that can't be turned into a Command."""

    def __init__(self, reason: ParseFailure, word: str = ""):
        self.reason = reason
        self.word = word
        super().__init__(self._message())

    def _message(self) -> str:
        match self.reason:
            case ParseFailure.EMPTY:
                return "I beg your pardon?"
            case ParseFailure.UNEXPECTED_WORD:
                return f'I don\'t understand how to use "{self.word}" here.'
            case _:
                return f'I don\'t know the word "{self.word}".'


def tokenize(text: str) -> list[str]:
    """Lowercase, split, strip trailing punctuation and drop articles."""
    tokens = []
    for raw in text.lower().split():
        token = raw.rstrip(TRAILING_PUNCTUATION)
        if token and token not in ARTICLES:
            tokens.append(token)
    return tokens


class Parser:
    """Parses player input against a Vocabulary."""

    def __init__(self, vocabulary: Vocabulary):
        self.vocabulary = vocabulary
        self.last_object: str | None = None

    def parse(self, text: str) -> Command:
        """Return the Command for ``text`` or raise ParseError."""
        tokens = tokenize(text)
        if not tokens:
            raise ParseError(ParseFailure.EMPTY)

        if self.last_object is not None:
            tokens = [self.last_object if t in PRONOUNS else t for t in tokens]

        movement = self._movement(tokens, text)
        if movement is not None:
            return movement

        verb, pos = self._verb(tokens)
        if pos == len(tokens):
            return Command(verb=verb, raw=text)

        phrase_end = pos
        while phrase_end < len(tokens) and not self.vocabulary.is_preposition(
            tokens[phrase_end]
        ):
            phrase_end += 1
        phrase = tokens[pos:phrase_end]

        direct = None
        if phrase and verb in FREE_FORM_VERBS:
            direct = "_".join(phrase)
            pos = phrase_end
        elif phrase:
            direct, consumed = self._resolve(phrase)
            pos += consumed
            if pos < len(tokens) and not self.vocabulary.is_preposition(tokens[pos]):
                raise ParseError(ParseFailure.UNEXPECTED_WORD, tokens[pos])

        preposition = None
        indirect = None
        if pos < len(tokens):
            preposition = tokens[pos]
            rest = tokens[pos + 1:]
            if rest:
                indirect, _ = self._resolve(rest, partial=False)

        if direct is not None and verb not in FREE_FORM_VERBS:
            self.last_object = direct

        return Command(
            verb=verb,
            direct_object=direct,
            preposition=preposition,
            indirect_object=indirect,
            raw=text,
        )

    def _movement(self, tokens: list[str], text: str) -> Command | None:
        vocab = self.vocabulary
        if len(tokens) == 1:
            direction = vocab.canonical_direction(tokens[0])
            if direction is not None:
                return Command(verb=MOVEMENT_VERB, direction=direction, raw=text)
        elif len(tokens) == 2 and tokens[0] in vocab.movement_verbs():
            direction = vocab.canonical_direction(tokens[1])
            if direction is not None:
                return Command(verb=MOVEMENT_VERB, direction=direction, raw=text)
        return None

    def _verb(self, tokens: list[str]) -> tuple[str, int]:
        """Resolve the verb, preferring a two-word phrase. Returns (verb, span)."""
        if len(tokens) >= 2:
            verb = self.vocabulary.canonical_verb(f"{tokens[0]} {tokens[1]}")
            if verb is not None:
                return verb, 2
        verb = self.vocabulary.canonical_verb(tokens[0])
        if verb is None:
            raise ParseError(ParseFailure.UNKNOWN_WORD, tokens[0])
        return verb, 1

    def _resolve(self, phrase: list[str], partial: bool = True) -> tuple[str, int]:
        """Resolve an object phrase, longest match first.

        Returns the object id and how many tokens of the phrase it used.
        With ``partial`` False a prefix match still consumes the whole phrase.
        """
        lookup = self.vocabulary.canonical_object
        for length in range(len(phrase), 0, -1):
            words = phrase[:length]
            found = lookup(" ".join(words)) or lookup("-".join(words))
            if found is not None:
                used = length if partial else len(phrase)
                return found, used
        for word in phrase:
            found = lookup(word)
            if found is not None:
                return found, len(phrase)
        raise ParseError(ParseFailure.UNKNOWN_OBJECT, phrase[0])
