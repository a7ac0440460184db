# order_parser/combinators.py
# Generic parser combinators. A parser turns a string into a lazy sequence of
# (value, remainder) candidates, so every reading of an ambiguous line stays
# available until a consumer decides which one it wants.

import logging

logger = logging.getLogger(__name__)


class Parser:
    """
    Base class for every grammar rule.

    A parser is an immutable description of a rule. Calling `parse(text)`
    returns an iterator of `(value, remainder)` pairs, where `remainder` is
    always a suffix of `text`. Results are produced only when pulled, so a
    consumer that stops at the first match never pays for the rest. A parser
    that does not match simply yields nothing.
    """
    def parse(self, text):
        raise NotImplementedError

    def __call__(self, text):
        return self.parse(text)

    def map(self, func):
        return transform(self, func)

    def __or__(self, other):
        return either(self, other)

    def __add__(self, other):
        return chain(self, other)

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class NoParse(ValueError):
    """Raised by first_full_parse() when no reading consumes the whole text."""
    def __init__(self, text):
        super().__init__(f"No complete parse of {text!r}")
        self.text = text


_NO_DEFAULT = object()


class Tagged:
    """A value wrapped by `either` (Left/Right) or `optional` (Present)."""
    __slots__ = ('value',)
    is_left = False

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return f"{self.__class__.__name__}({self.value!r})"


class Present(Tagged):
    """A value produced by the inner parser of an `optional` parser."""
    __slots__ = ()


class Left(Tagged):
    __slots__ = ()
    is_left = True


class Right(Tagged):
    __slots__ = ()


def _check_parser(candidate):
    if not isinstance(candidate, Parser):
        raise TypeError(f"Expected a Parser, got {type(candidate).__name__}: {candidate!r}")
    return candidate


# --- Primitives ---

class Never(Parser):
    def parse(self, text):
        return iter(())


class Empty(Parser):
    def parse(self, text):
        yield (), text


class Literal(Parser):
    def __init__(self, tag):
        if not tag:
            raise ValueError("A literal needs a non-empty tag.")
        self.tag = tag

    def parse(self, text):
        # Case-sensitive prefix compare; at most one result.
        if text.startswith(self.tag):
            yield self.tag, text[len(self.tag):]

    def __repr__(self):
        return f"Literal({self.tag!r})"


class OneOf(Parser):
    """
    Matches the first of several literal tags, longest tag tried first.

    Unlike `either`, only one tag can match, so `one_of('holds', 'hold', 'h')`
    never reads "holds" as "h" followed by "olds". With `ignore_case` the
    tags are lowercased and the input compared case-insensitively; the
    yielded value is always the lowercase tag.
    """
    def __init__(self, tags, ignore_case=False):
        if not tags:
            raise ValueError("one_of() needs at least one tag.")
        if not all(tags):
            raise ValueError("one_of() tags must be non-empty.")
        self.ignore_case = ignore_case
        if ignore_case:
            tags = [tag.lower() for tag in tags]
        self.tags = tuple(sorted(tags, key=len, reverse=True))

    def parse(self, text):
        for tag in self.tags:
            head = text[:len(tag)]
            if head == tag or (self.ignore_case and head.lower() == tag):
                yield tag, text[len(tag):]
                return

    def __repr__(self):
        return f"OneOf({self.tags!r})"


class Whitespace(Parser):
    """Consumes a run of whitespace; `required` demands at least one character."""
    def __init__(self, required=True):
        self.required = required

    def parse(self, text):
        stripped = text.lstrip()
        consumed = text[:len(text) - len(stripped)]
        if consumed or not self.required:
            yield consumed, stripped

    def __repr__(self):
        return f"Whitespace(required={self.required})"


class EndOfInput(Parser):
    def parse(self, text):
        if not text:
            yield (), text


# --- Compounds ---

class Optional(Parser):
    def __init__(self, inner):
        self.inner = _check_parser(inner)

    def parse(self, text):
        # Every present reading first, then the absent fallback.
        for value, remainder in self.inner.parse(text):
            yield Present(value), remainder
        yield None, text

    def __repr__(self):
        return f"Optional({self.inner!r})"


class Alternative(Parser):
    def __init__(self, left, right):
        self.left = _check_parser(left)
        self.right = _check_parser(right)

    def parse(self, text):
        for value, remainder in self.left.parse(text):
            yield Left(value), remainder
        for value, remainder in self.right.parse(text):
            yield Right(value), remainder

    def __repr__(self):
        return f"Alternative({self.left!r}, {self.right!r})"


class Chain(Parser):
    def __init__(self, first, second):
        self.first = _check_parser(first)
        self.second = _check_parser(second)

    def parse(self, text):
        for first_value, rest in self.first.parse(text):
            # The second parser only runs once a first reading is pulled.
            for second_value, remainder in self.second.parse(rest):
                yield (first_value, second_value), remainder

    def __repr__(self):
        return f"Chain({self.first!r}, {self.second!r})"


class Map(Parser):
    def __init__(self, inner, func):
        self.inner = _check_parser(inner)
        if not callable(func):
            raise TypeError(f"map() needs a callable, got {type(func).__name__}")
        self.func = func

    def parse(self, text):
        for value, remainder in self.inner.parse(text):
            yield self.func(value), remainder

    def __repr__(self):
        return f"Map({self.inner!r}, {getattr(self.func, '__name__', self.func)!r})"


class Adapter(Parser):
    """
    Wraps a plain function `text -> (value, remainder)` as a parser.

    The function reports failure with a falsy result, either None or a pair
    that is false such as a failed grammar.RuleResult. Any truthy pair is a
    match, whatever its value. This is how the order grammar lets support and
    convoy rules call the move and hold rules by ordinary recursion rather
    than through a self-referencing parser graph.
    """
    def __init__(self, func):
        if not callable(func):
            raise TypeError(f"adapt() needs a callable, got {type(func).__name__}")
        self.func = func

    def parse(self, text):
        result = self.func(text)
        if result:
            value, remainder = result
            yield value, remainder

    def __repr__(self):
        return f"Adapter({getattr(self.func, '__name__', self.func)!r})"


# --- Factory functions ---

_NEVER = Never()
_EMPTY = Empty()


def never():
    return _NEVER


def empty():
    return _EMPTY


def literal(tag):
    return Literal(tag)


def one_of(*tags, ignore_case=False):
    return OneOf(tags, ignore_case)


def whitespace():
    return Whitespace(required=True)


def skip_whitespace():
    return Whitespace(required=False)


def end_of_input():
    return EndOfInput()


def optional(parser):
    return Optional(parser)


def either(left, right):
    return Alternative(left, right)


def chain(first, second):
    return Chain(first, second)


def transform(parser, func):
    return Map(parser, func)


def adapt(func):
    return Adapter(func)


def sequence(*parsers):
    """
    Chains any number of parsers and flattens their values into one tuple.

    `sequence(a, b, c)` is `chain(a, chain(b, c))` with the nested pairs
    unpacked, so readings are produced in the same order: the last parser
    varies fastest.
    """
    if not parsers:
        return empty()
    head = _check_parser(parsers[0])
    if len(parsers) == 1:
        return transform(head, lambda value: (value,))
    return transform(chain(head, sequence(*parsers[1:])),
                     lambda pair: (pair[0],) + pair[1])


def full_parses(parser, text):
    """Lazily yields the values of every reading that consumes all of `text`."""
    for value, remainder in parser.parse(text):
        if not remainder:
            yield value


def first_full_parse(parser, text, default=_NO_DEFAULT):
    """
    Returns the value of the first reading that consumes all of `text`.

    Raises:
        NoParse: If no reading consumes all of `text` and no `default` is given.
    """
    for value in full_parses(parser, text):
        logger.debug("Complete parse of %r with %r", text, parser)
        return value
    if default is _NO_DEFAULT:
        raise NoParse(text)
    return default
