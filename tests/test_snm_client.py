import unittest
from unittest.mock import MagicMock, patch

from jeepney import HeaderFields, MessageFlag, new_error, new_method_return

import snm_client
from snm_client import BackendUnreachable, SnmClient
from snm_types import (
    ConnectionIdentity,
    ConnectionProperties,
    ConnectionStatus,
    ConnectivityKind,
    NetworkEntry,
)


def replying(signature=None, body=()):
    return lambda msg: new_method_return(msg, signature, body)


def failing(name="com.github.okeri.snm.Error", text="boom"):
    return lambda msg: new_error(msg, name, "s", (text,))


class MarshallingTests(unittest.TestCase):
    def test_network_quality_is_clamped(self):
        entry = snm_client.unmarshal_network((2, "home", True, 140))
        self.assertEqual(entry, NetworkEntry(ConnectivityKind.WIFI, "home", True, 100))

    def test_state_carries_address(self):
        state = snm_client.unmarshal_state((1, "", False, 100, "192.168.1.4"))
        self.assertEqual(state.kind, ConnectivityKind.ETHERNET)
        self.assertEqual(state.address, "192.168.1.4")

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(ValueError):
            snm_client.unmarshal_network((9, "x", False, 1))

    def test_properties_use_presence_flags(self):
        props = snm_client.unmarshal_properties(("", -65, True, False, False))
        self.assertEqual(props, ConnectionProperties(True, None, None))

        props = snm_client.unmarshal_properties(("", -72, False, True, True))
        self.assertEqual(props, ConnectionProperties(False, "", -72))

    def test_absent_values_marshal_with_placeholders(self):
        body = snm_client.marshal_properties("home", ConnectionProperties(True, None, None))
        self.assertEqual(body, ("home", "", -65, True, False, False))

        body = snm_client.marshal_properties("home", ConnectionProperties(False, "pw", -80))
        self.assertEqual(body, ("home", "pw", -80, False, True, True))

    def test_identity_is_a_single_struct(self):
        identity = ConnectionIdentity(ConnectivityKind.WIFI, "cafe", False)
        self.assertEqual(snm_client.marshal_identity(identity), ((2, "cafe", False),))


class ClientCallTests(unittest.TestCase):
    def setUp(self):
        self.conn = MagicMock()
        self.client = SnmClient(self.conn)

    def sent(self):
        return self.conn.send.call_args[0][0]

    def test_get_state(self):
        self.conn.send_and_get_reply.side_effect = replying("(usbus)", ((2, "home", True, 80, "10.0.0.2"),))
        state = self.client.get_state()
        self.assertEqual(state.essid, "home")
        self.assertTrue(state.is_online)
        msg = self.conn.send_and_get_reply.call_args[0][0]
        self.assertEqual(msg.header.fields[HeaderFields.member], "get_state")
        self.assertEqual(msg.header.fields[HeaderFields.destination], "com.github.okeri.snm")

    def test_get_networks(self):
        raw = [(2, "home", True, 80), (1, "", False, 100)]
        self.conn.send_and_get_reply.side_effect = replying("a(usbu)", (raw,))
        networks = self.client.get_networks()
        self.assertEqual([n.kind for n in networks], [ConnectivityKind.WIFI, ConnectivityKind.ETHERNET])

    def test_get_properties_sends_essid(self):
        self.conn.send_and_get_reply.side_effect = replying("sibbb", ("pw", -70, True, True, True))
        props = self.client.get_properties("home")
        self.assertEqual(props, ConnectionProperties(True, "pw", -70))
        msg = self.conn.send_and_get_reply.call_args[0][0]
        self.assertEqual(msg.header.fields[HeaderFields.member], "get_props")
        self.assertEqual(msg.body, ("home",))

    def test_error_reply_becomes_backend_unreachable(self):
        self.conn.send_and_get_reply.side_effect = failing(text="no such network")
        with self.assertRaises(BackendUnreachable) as ctx:
            self.client.get_properties("home")
        self.assertIn("no such network", str(ctx.exception))

    def test_transport_error_becomes_backend_unreachable(self):
        self.conn.send_and_get_reply.side_effect = ConnectionResetError("gone")
        with self.assertRaises(BackendUnreachable):
            self.client.get_networks()

    def test_malformed_reply(self):
        self.conn.send_and_get_reply.side_effect = replying("(usbus)", ((42, "x", True, 1, ""),))
        with self.assertRaises(BackendUnreachable) as ctx:
            self.client.get_state()
        self.assertIn("malformed", str(ctx.exception))

    def test_commands_do_not_wait_for_replies(self):
        self.client.connect(ConnectionIdentity(ConnectivityKind.WIFI, "cafe", True))
        msg = self.sent()
        self.assertEqual(msg.header.fields[HeaderFields.member], "connect")
        self.assertEqual(msg.header.fields[HeaderFields.signature], "(usb)")
        self.assertEqual(msg.body, ((2, "cafe", True),))
        self.assertTrue(msg.header.flags & MessageFlag.no_reply_expected)
        self.conn.send_and_get_reply.assert_not_called()

    def test_set_properties_signature(self):
        self.client.set_properties("home", ConnectionProperties(True, "pw", None))
        msg = self.sent()
        self.assertEqual(msg.header.fields[HeaderFields.signature], "ssibbb")
        self.assertEqual(msg.body, ("home", "pw", -65, True, True, False))

    def test_disconnect_and_hello(self):
        self.client.disconnect()
        self.assertEqual(self.sent().header.fields[HeaderFields.member], "disconnect")
        self.client.hello()
        self.assertEqual(self.sent().header.fields[HeaderFields.member], "hello")

    def test_send_failure(self):
        self.conn.send.side_effect = BrokenPipeError("closed")
        with self.assertRaises(BackendUnreachable):
            self.client.disconnect()

    def test_context_manager_closes(self):
        with self.client:
            pass
        self.conn.close.assert_called_once_with()


class OpenConnectionTests(unittest.TestCase):
    def test_bus_names(self):
        self.assertEqual(snm_client.bus_address("System"), "SYSTEM")
        self.assertEqual(snm_client.bus_address("session"), "SESSION")
        with self.assertRaises(ValueError):
            snm_client.bus_address("starter")

    def test_missing_bus_is_unreachable(self):
        with patch("snm_client.open_dbus_connection", side_effect=FileNotFoundError("no socket")):
            with self.assertRaises(BackendUnreachable):
                snm_client.open_connection("system")

    def test_connect_bus_wraps_connection(self):
        conn = MagicMock()
        with patch("snm_client.open_dbus_connection", return_value=conn) as opener:
            client = SnmClient.connect_bus("session")
        opener.assert_called_once_with(bus="SESSION")
        client.close()
        conn.close.assert_called_once_with()


class StatusTests(unittest.TestCase):
    def test_status_codes(self):
        self.assertEqual(snm_client.unmarshal_status(2), ConnectionStatus.AUTHENTICATING)
        self.assertEqual(ConnectionStatus.ACQUIRING_ADDRESS.label, "Getting ip address")


if __name__ == "__main__":
    unittest.main()
