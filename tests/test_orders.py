import unittest

from order_parser.orders import ARMY, FLEET, Convoy, Hold, Move, Support


class TestOrderValues(unittest.TestCase):
    def setUp(self):
        """Orders used by several tests."""
        self.hold = Hold(ARMY, "paris")
        self.move = Move(ARMY, "paris", "burgundy")

    def test_equality_and_hashing(self):
        self.assertEqual(self.hold, Hold(ARMY, "paris"))
        self.assertNotEqual(self.hold, Hold(FLEET, "paris"))
        self.assertNotEqual(self.hold, Hold(ARMY, "brest"))
        self.assertEqual(len({self.move, Move(ARMY, "paris", "burgundy")}), 1)

    def test_different_kinds_are_never_equal(self):
        support = Support(FLEET, "brest", self.move)
        convoy = Convoy(FLEET, "brest", self.move)
        self.assertNotEqual(support, convoy)
        self.assertNotEqual(self.hold, Move(ARMY, "paris", "paris"))

    def test_move_source_and_destination(self):
        self.assertEqual(self.move.source, "paris")
        self.assertEqual(self.move.place, "paris")
        self.assertEqual(self.move.destination, "burgundy")
        self.assertEqual(self.move.type, "Move")

    def test_supported_hold_has_same_source_and_destination(self):
        support = Support(ARMY, "brest", self.hold)
        self.assertEqual(support.supported_source, "paris")
        self.assertEqual(support.supported_destination, "paris")
        self.assertEqual(support.supported_unit, ARMY)
        self.assertFalse(support.is_move)

    def test_supported_move(self):
        support = Support(None, "gascony", self.move)
        self.assertEqual(support.supported_source, "paris")
        self.assertEqual(support.supported_destination, "burgundy")
        self.assertTrue(support.is_move)

    def test_convoy_requires_a_move(self):
        with self.assertRaises(TypeError):
            Convoy(FLEET, "english channel", self.hold)
        with self.assertRaises(TypeError):
            Support(ARMY, "brest", Support(ARMY, "gascony", self.hold))

    def test_unknown_unit_is_rejected(self):
        with self.assertRaises(ValueError):
            Hold("Zeppelin", "paris")

    def test_text_rendering(self):
        self.assertEqual(str(self.hold), "A paris H")
        self.assertEqual(str(Move(None, "western med", "spain (sc)")), "western med - spain (sc)")
        self.assertEqual(str(Support(FLEET, "brest", self.move)), "F brest S A paris - burgundy")
        self.assertEqual(str(Convoy(FLEET, "english channel", Move(ARMY, "london", "brest"))),
                         "F english channel C A london - brest")

    def test_repr(self):
        self.assertEqual(repr(self.hold), "Hold('Army', 'paris')")

    def test_orders_are_immutable(self):
        orders = {self.hold, self.move}
        with self.assertRaises(AttributeError):
            self.hold.place = "brest"
        with self.assertRaises(AttributeError):
            self.move.destination = "gascony"
        with self.assertRaises(AttributeError):
            del self.hold.unit
        # Hash and membership are unchanged by the rejected writes.
        self.assertIn(self.hold, orders)
        self.assertEqual(self.hold.place, "paris")


if __name__ == '__main__':
    unittest.main()
