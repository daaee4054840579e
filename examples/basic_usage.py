"""Basic usage examples for certstore."""

import os
import threading
from datetime import timedelta

from certstore import LockNotAcquiredError, LockPolicy, Storage
from certstore.stores import MemoryObjectStore

CERT = b"-----BEGIN CERTIFICATE-----\nMIIB...\n-----END CERTIFICATE-----\n"
KEY = os.urandom(32)

# Two "processes" sharing one backend
backend = MemoryObjectStore()
policy = LockPolicy(poll_interval=timedelta(milliseconds=200))
node_a = Storage(backend, prefix="acme", encryption_key=KEY, policy=policy)
node_b = Storage(backend, prefix="acme", encryption_key=KEY, policy=policy)


if __name__ == "__main__":
    print("=" * 60)
    print("Example 1: Encrypted storage")
    print("=" * 60)

    node_a.store("example.com/cert.pem", CERT)
    print(f"Loaded back: {node_a.load('example.com/cert.pem')[:27]!r}")
    print(f"Raw bytes in the store: {backend.get('acme/example.com/cert.pem')[:27]!r}\n")

    print("=" * 60)
    print("Example 2: Locking across nodes")
    print("=" * 60)

    with node_a.locked("example.com"):
        print("Node A holds the lock for example.com")
        try:
            node_b.lock("example.com", timeout=1.0)
        except LockNotAcquiredError as e:
            print(f"Node B: {e}")
    print("Node A released the lock")

    node_b.lock("example.com", timeout=1.0)
    print("Node B got the lock right away\n")
    node_b.unlock("example.com")

    print("=" * 60)
    print("Example 3: Cancelling a wait")
    print("=" * 60)

    node_a.lock("example.org")
    cancel = threading.Event()
    threading.Timer(0.5, cancel.set).start()
    try:
        node_b.lock("example.org", cancel=cancel)
    except LockNotAcquiredError as e:
        print(f"Node B: {e}")
    node_a.unlock("example.org")
