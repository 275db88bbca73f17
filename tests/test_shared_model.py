import threading
import unittest

from shared_model import SharedModel
from snm_types import ActiveConnectionState, ConnectionStatus, ConnectivityKind, NetworkEntry


class SharedModelTests(unittest.TestCase):
    def test_every_write_moves_generation(self):
        model = SharedModel()
        start = model.generation
        model.set_networks([NetworkEntry(ConnectivityKind.WIFI, "home")])
        model.set_state(ActiveConnectionState.disconnected())
        model.set_status(ConnectionStatus.CONNECTING)
        model.post_notice("hello")
        self.assertEqual(model.generation, start + 4)

    def test_snapshot_is_immutable_copy(self):
        model = SharedModel()
        networks = [NetworkEntry(ConnectivityKind.WIFI, "home")]
        model.set_networks(networks)
        networks.append(NetworkEntry(ConnectivityKind.WIFI, "cafe"))

        snapshot = model.snapshot()
        self.assertEqual(len(snapshot.networks), 1)
        self.assertIsNone(snapshot.status)
        self.assertFalse(snapshot.state.is_active)

    def test_notices_drain_once(self):
        model = SharedModel()
        model.post_notice("a")
        model.post_notice("b")
        with model.lock:
            self.assertEqual(model.drain_notices_locked(), ["a", "b"])
            self.assertEqual(model.drain_notices_locked(), [])

    def test_seed_keeps_values_from_notifications(self):
        model = SharedModel()
        fresh = [NetworkEntry(ConnectivityKind.WIFI, "fresh")]
        model.set_networks(fresh)

        fetched_state = ActiveConnectionState(NetworkEntry(ConnectivityKind.ETHERNET), "10.0.0.9")
        model.seed(fetched_state, [NetworkEntry(ConnectivityKind.WIFI, "stale")])

        snapshot = model.snapshot()
        self.assertEqual(snapshot.networks, tuple(fresh))
        self.assertEqual(snapshot.state, fetched_state)

    def test_seed_fills_untouched_model(self):
        model = SharedModel()
        networks = [NetworkEntry(ConnectivityKind.WIFI, "home")]
        before = model.generation
        model.seed(ActiveConnectionState.disconnected(), networks)
        self.assertEqual(model.snapshot().networks, tuple(networks))
        self.assertGreater(model.generation, before)

    def test_concurrent_writers(self):
        model = SharedModel()

        def writer(tag):
            for i in range(200):
                model.set_networks([NetworkEntry(ConnectivityKind.WIFI, f"{tag}{i}")])

        threads = [threading.Thread(target=writer, args=(tag,)) for tag in "abcd"]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(model.generation, 800)
        self.assertEqual(len(model.snapshot().networks), 1)


if __name__ == "__main__":
    unittest.main()
