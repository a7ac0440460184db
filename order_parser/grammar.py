# order_parser/grammar.py
# Recognizes hold, move, support and convoy orders typed as free text.
#
# Place names have no terminator ("Eastern Mediterranean", "Spain (sc)"), so a
# rule cannot tell where a name stops by looking ahead. Each rule instead tries
# every possible name length, shortest first, and keeps the first split that
# lets the rest of the line parse completely.
#
#   UnitDesignation: 'army' | 'fleet' | 'a' | 'f'
#   PlaceName:       run of letters . ( ) with delimiters between runs
#   HoldOrder:       Unit? PlaceName ('holds' | 'hold' | 'h')
#   MoveOrder:       Unit? PlaceName ('-' | 'to') PlaceName
#   SupportOrder:    Unit? PlaceName ('supports' | 'support' | 's') (MoveOrder | HoldOrder)
#   ConvoyOrder:     Unit? PlaceName ('convoys' | 'convoy' | 'c') MoveOrder

import logging
from collections import namedtuple
from functools import partial

from order_parser.combinators import (Parser, adapt, either, end_of_input, full_parses,
                                      one_of, sequence, skip_whitespace, whitespace)
from order_parser.orders import ARMY, FLEET, Convoy, Hold, Move, Support

logger = logging.getLogger(__name__)

# Keyword tables. Keywords match regardless of case ("A Brest H"); place names
# are returned exactly as typed.
UNIT_TOKENS = {'army': ARMY, 'fleet': FLEET, 'a': ARMY, 'f': FLEET}
HOLD_KEYWORDS = ('holds', 'hold', 'h')
MOVE_SEPARATORS = ('-', 'to')
SUPPORT_KEYWORDS = ('supports', 'support', 's')
CONVOY_KEYWORDS = ('convoys', 'convoy', 'c')

# A recognized unit token must be followed by whitespace, otherwise the rule
# fails instead of retrying without a unit ("ankara h" is rejected).
STRICT_UNIT_PREFIX = True

NAME_PUNCTUATION = '.()'


class RuleResult(namedtuple('RuleResult', ['order', 'remainder'])):
    """
    Outcome of one order rule.

    On success `order` holds the parsed order and `remainder` is empty. On
    failure `order` is None and `remainder` is the text the rule was given,
    untouched, so it can be handed straight to the next rule.
    """
    __slots__ = ()

    def __bool__(self):
        return self.order is not None


class OrderParseError(ValueError):
    """Raised by parse_order_string() when no rule accepts a line."""
    def __init__(self, line):
        super().__init__(f"Could not parse order: {line!r}")
        self.line = line


def _success(order):
    return RuleResult(order, "")


def _failure(text):
    return RuleResult(None, text)


def _is_name_char(char):
    return char.isalpha() or char in NAME_PUNCTUATION


def place_names(text):
    """
    Yields every candidate place name at the start of `text`, shortest first.

    Each candidate is a `(name, remainder)` pair ending at a word boundary.
    Delimiters between runs of name characters stay inside longer candidates,
    and the delimiter that ends a candidate stays at the head of its remainder:

        >>> list(place_names("Eastern Mediterranean Sea "))
        [('Eastern', ' Mediterranean Sea '),
         ('Eastern Mediterranean', ' Sea '),
         ('Eastern Mediterranean Sea', ' ')]

    Text without any name character yields nothing.
    """
    length = len(text)
    index = 0
    start = None
    while index < length:
        # Collapse the delimiter run up to the next name character.
        while index < length and not _is_name_char(text[index]):
            index += 1
        if index == length:
            return
        if start is None:
            start = index
        while index < length and _is_name_char(text[index]):
            index += 1
        yield text[start:index], text[index:]


class PlaceName(Parser):
    def parse(self, text):
        return place_names(text)


PLACE_NAME = PlaceName()

_UNIT = one_of(*UNIT_TOKENS, ignore_case=True).map(UNIT_TOKENS.__getitem__)
_HOLD = one_of(*HOLD_KEYWORDS, ignore_case=True)
_SEPARATOR = one_of(*MOVE_SEPARATORS, ignore_case=True)
_SUPPORT = one_of(*SUPPORT_KEYWORDS, ignore_case=True)
_CONVOY = one_of(*CONVOY_KEYWORDS, ignore_case=True)

# Everything after the unit prefix, for each rule. Values are flat tuples; the
# rules below pick the place names out by position.
_HOLD_BODY = sequence(PLACE_NAME, whitespace(), _HOLD, end_of_input())
_MOVE_BODY = sequence(PLACE_NAME, skip_whitespace(), _SEPARATOR, skip_whitespace(),
                      PLACE_NAME, end_of_input())
_SUPPORT_HEAD = sequence(PLACE_NAME, whitespace(), _SUPPORT, whitespace())
_CONVOY_HEAD = sequence(PLACE_NAME, whitespace(), _CONVOY, whitespace())


def parse_unit(text, strict_unit=STRICT_UNIT_PREFIX):
    """
    Reads an optional unit designation from the start of an order.

    Returns `(unit, rest)` with `unit` None when the order names no unit and
    leading whitespace trimmed from `rest`. Returns None when a unit token is
    present but not followed by whitespace and `strict_unit` is set; the
    caller must then reject the whole order.
    """
    for unit, rest in _UNIT.parse(text):
        separated = rest.lstrip()
        if len(separated) < len(rest):
            return unit, separated
        if strict_unit:
            return None
    return None, text.lstrip()


def parse_hold_order(text, strict_unit=STRICT_UNIT_PREFIX):
    """Parses `[unit] <place> holds`, e.g. "a brest h" or "western med sea holds"."""
    prefix = parse_unit(text, strict_unit)
    if prefix is None:
        return _failure(text)
    unit, rest = prefix

    for values in full_parses(_HOLD_BODY, rest):
        order = Hold(unit, values[0])
        logger.debug("Parsed %r as %r", text, order)
        return _success(order)
    return _failure(text)


def parse_move_order(text, strict_unit=STRICT_UNIT_PREFIX):
    """
    Parses `[unit] <source> (- | to) <destination>`.

    Source names are tried shortest first; for each one every destination
    name is tried before moving on to a longer source.
    """
    prefix = parse_unit(text, strict_unit)
    if prefix is None:
        return _failure(text)
    unit, rest = prefix

    for values in full_parses(_MOVE_BODY, rest):
        order = Move(unit, values[0], values[4])
        logger.debug("Parsed %r as %r", text, order)
        return _success(order)
    return _failure(text)


def _parse_supporting_order(text, order_class, head, supported_rules, strict_unit):
    prefix = parse_unit(text, strict_unit)
    if prefix is None:
        return _failure(text)
    unit, rest = prefix

    # Nested rules are plain function calls; the first one listed is preferred.
    supported = adapt(partial(supported_rules[0], strict_unit=strict_unit))
    for rule in supported_rules[1:]:
        supported = either(supported, adapt(partial(rule, strict_unit=strict_unit)))
        supported = supported.map(lambda tagged: tagged.value)

    for head_values, supported_order in full_parses(sequence(head, supported), rest):
        order = order_class(unit, head_values[0], supported_order)
        logger.debug("Parsed %r as %r", text, order)
        return _success(order)
    return _failure(text)


def parse_support_order(text, strict_unit=STRICT_UNIT_PREFIX):
    """
    Parses `[unit] <place> supports <move or hold>`.

    The supported part is read as a move first and as a hold only if no move
    reading exists, so "a brest s a paris h" supports a hold of Paris.
    """
    return _parse_supporting_order(text, Support, _SUPPORT_HEAD,
                                   (parse_move_order, parse_hold_order), strict_unit)


def parse_convoy_order(text, strict_unit=STRICT_UNIT_PREFIX):
    """Parses `[unit] <place> convoys <move>`. Only moves can be convoyed."""
    return _parse_supporting_order(text, Convoy, _CONVOY_HEAD,
                                   (parse_move_order,), strict_unit)


# Order in which parse_order() tries the rules. Support and convoy come first:
# a hold or move search would otherwise happily read "a brest s a paris h" as
# a hold of a place called "brest s a paris".
ORDER_RULES = (parse_support_order, parse_convoy_order, parse_hold_order, parse_move_order)


def parse_order(line, strict_unit=STRICT_UNIT_PREFIX):
    """
    Parses a single line of text into an order.

    The line is stripped, then each rule in ORDER_RULES is tried in turn.
    Place names in the result are substrings of `line`, in their original
    case. Returns a RuleResult: the first successful rule's result, or a
    failure carrying `line` exactly as it was passed in.
    """
    text = line.strip()
    for rule in ORDER_RULES:
        result = rule(text, strict_unit=strict_unit)
        if result:
            return result
    logger.info("No order rule matches %r", line)
    return _failure(line)


def parse_order_string(line, strict_unit=STRICT_UNIT_PREFIX):
    """
    Parses a single line of text into an order, raising on failure.

    Raises:
        OrderParseError: If no rule accepts the line.
    """
    result = parse_order(line, strict_unit)
    if not result:
        raise OrderParseError(line)
    return result.order


def parse_orders(lines, strict_unit=STRICT_UNIT_PREFIX):
    """
    Parses a batch of order lines, one order per line.

    `lines` may be an iterable of strings or a single multi-line string.
    Blank lines are skipped.

    Returns:
        tuple: (orders, rejected) where `orders` lists the parsed orders in
               input order and `rejected` lists the lines no rule accepted.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    orders = []
    rejected = []
    for line in lines:
        if not line.strip():
            continue
        result = parse_order(line, strict_unit)
        if result:
            orders.append(result.order)
        else:
            rejected.append(line)
    if rejected:
        logger.info("Rejected %d of %d order lines", len(rejected), len(orders) + len(rejected))
    return orders, rejected
