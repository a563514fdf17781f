from django.test import RequestFactory, SimpleTestCase

from social.exceptions import Unauthorized
from social.guards import parse_caller_id, require_caller, require_message_party, require_same_identity
from social.models import Message


class ParseCallerIdTests(SimpleTestCase):

    def test_integer_strings(self):
        self.assertEqual(parse_caller_id("7"), 7)
        self.assertEqual(parse_caller_id(" 12 "), 12)
        self.assertEqual(parse_caller_id(3), 3)

    def test_missing_or_garbage_is_none(self):
        self.assertIsNone(parse_caller_id(None))
        self.assertIsNone(parse_caller_id(""))
        self.assertIsNone(parse_caller_id("abc"))
        self.assertIsNone(parse_caller_id("1.5"))

    def test_zero_means_no_caller(self):
        self.assertIsNone(parse_caller_id("0"))


class RequireCallerTests(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def test_missing_caller_rejected(self):
        request = self.factory.get("/api/notifications")
        request.caller_id = None
        with self.assertRaises(Unauthorized):
            require_caller(request)

    def test_caller_returned(self):
        request = self.factory.get("/api/notifications")
        request.caller_id = 4
        self.assertEqual(require_caller(request), 4)


class RequireSameIdentityTests(SimpleTestCase):

    def test_match_passes(self):
        require_same_identity(1, 1)

    def test_mismatch_rejected(self):
        with self.assertRaises(Unauthorized) as ctx:
            require_same_identity(2, 1, "Unauthorized: You can only view your own messages")
        self.assertEqual(ctx.exception.message, "Unauthorized: You can only view your own messages")
        self.assertEqual(ctx.exception.status_code, 403)

    def test_missing_caller_rejected(self):
        with self.assertRaises(Unauthorized):
            require_same_identity(None, 1)


class RequireMessagePartyTests(SimpleTestCase):

    def setUp(self):
        self.message = Message(id=5, sender_id=1, recipient_id=2, text="hi")

    def test_sender_and_receiver_pass(self):
        require_message_party(1, self.message)
        require_message_party(2, self.message)

    def test_third_party_rejected(self):
        with self.assertRaises(Unauthorized) as ctx:
            require_message_party(3, self.message)
        self.assertIn("only delete your own messages", ctx.exception.message)

    def test_no_caller_rejected(self):
        with self.assertRaises(Unauthorized) as ctx:
            require_message_party(None, self.message)
        self.assertIn("Authentication required", ctx.exception.message)
