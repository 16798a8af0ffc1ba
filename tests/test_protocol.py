import unittest

from pagebridge import protocol
from pagebridge.models import ApplyResult


class ProtocolTests(unittest.TestCase):
    def test_encode_is_single_line(self) -> None:
        frame = protocol.encode({"type": "uiMap", "data": {"text": "line1\nline2"}})
        self.assertNotIn("\n", frame)

    def test_decode_requires_type(self) -> None:
        self.assertEqual(protocol.decode('{"type": "ping"}'), {"type": "ping"})
        for raw in ("", "{", "null", '{"type": 3}', "[]"):
            with self.assertRaises(protocol.ProtocolError):
                protocol.decode(raw)

    def test_deeply_nested_payload_is_a_protocol_error(self) -> None:
        with self.assertRaises(protocol.ProtocolError):
            protocol.decode("[" * 100000)

    def test_hello(self) -> None:
        message = protocol.hello("MetaMask")
        self.assertEqual(message["type"], "hello")
        self.assertEqual(message["source"], "MetaMask")
        self.assertIn("timestamp", message)

    def test_apply_ack(self) -> None:
        self.assertEqual(protocol.apply_ack(ApplyResult(True)), {"type": "applyAck", "success": True})
        self.assertEqual(
            protocol.apply_ack(ApplyResult(False, "bad selector")),
            {"type": "applyAck", "success": False, "error": "bad selector"},
        )


if __name__ == "__main__":
    unittest.main()
