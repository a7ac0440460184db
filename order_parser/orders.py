# order_parser/orders.py
# Structured order values produced by the order grammar.
# Place names are kept exactly as typed; resolving them against the board is
# left to whoever consumes the orders.

ARMY = 'Army'
FLEET = 'Fleet'

UNIT_ABBREVIATIONS = {ARMY: 'A', FLEET: 'F'}


class Order:
    """Base class for all parsed orders."""
    # To add a new order type (e.g., Retreat, Build):
    # 1. Subclass Order and store its places with _set() in __init__.
    # 2. Return every identifying attribute from _key() so equality and
    #    hashing keep working.
    # 3. Give it a rule in grammar.py and list that rule in ORDER_RULES.
    def __init__(self, unit, place):
        if unit not in (None, ARMY, FLEET):
            raise ValueError(f"Unknown unit designation: {unit!r}")
        self._set(unit=unit, place=place, type=self.__class__.__name__)

    def _set(self, **fields):
        # Orders are hashed by value, so fields are only written here.
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} orders are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} orders are immutable")

    def _key(self):
        return (self.unit, self.place)

    def _prefix(self):
        if self.unit is None:
            return self.place
        return f"{UNIT_ABBREVIATIONS[self.unit]} {self.place}"

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash((self.type,) + self._key())

    def __repr__(self):
        fields = ", ".join(repr(value) for value in self._key())
        return f"{self.type}({fields})"


class Hold(Order):
    def __init__(self, unit, place):
        super().__init__(unit, place)

    @property
    def destination(self):
        return self.place

    def __str__(self):
        return f"{self._prefix()} H"


class Move(Order):
    def __init__(self, unit, source, destination):
        super().__init__(unit, source)
        self._set(destination=destination)

    @property
    def source(self):
        return self.place

    def _key(self):
        return (self.unit, self.place, self.destination)

    def __str__(self):
        return f"{self._prefix()} - {self.destination}"


class SupportingOrder(Order):
    """Shared shape of orders that name a second order they help along."""
    keyword = None
    allowed = ()

    def __init__(self, unit, place, supported):
        super().__init__(unit, place)
        if not isinstance(supported, self.allowed):
            names = " or ".join(cls.__name__ for cls in self.allowed)
            raise TypeError(f"{self.type} expects a {names} order, got {supported!r}")
        self._set(supported=supported)

    @property
    def supported_unit(self):
        return self.supported.unit

    @property
    def supported_source(self):
        return self.supported.place

    @property
    def supported_destination(self):
        return self.supported.destination

    @property
    def is_move(self):
        return isinstance(self.supported, Move)

    def _key(self):
        return (self.unit, self.place, self.supported)

    def __str__(self):
        return f"{self._prefix()} {self.keyword} {self.supported}"


class Support(SupportingOrder):
    """
    A support order, either supporting a move or a hold.

    For a supported hold the supported source and destination are the same
    place.
    """
    keyword = 'S'
    allowed = (Hold, Move)


class Convoy(SupportingOrder):
    """A fleet carrying an army's move across water. Only moves can be convoyed."""
    keyword = 'C'
    allowed = (Move,)
