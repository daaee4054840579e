"""Examples of using different object store backends."""

import os
import tempfile

from certstore import S3Options, Storage
from certstore.stores import FileObjectStore

CERT = b"-----BEGIN CERTIFICATE-----\nMIIB...\n-----END CERTIFICATE-----\n"
KEY = os.urandom(32)

# Example 1: FileObjectStore (persistent, multi-process safe on one host)
print("=" * 60)
print("Example 1: FileObjectStore (directory on disk)")
print("=" * 60)

directory = tempfile.mkdtemp(prefix="certstore_demo_")
file_store = FileObjectStore(directory)
storage = Storage(file_store, prefix="acme", encryption_key=KEY)

with storage.locked("example.com"):
    storage.store("example.com/cert.pem", CERT)
    print(f"  → Stored under {directory}: {file_store.list()}")

# A new Storage on the same directory (simulates another process)
again = Storage(FileObjectStore(directory), prefix="acme", encryption_key=KEY)
print(f"Second instance loads: {again.load('example.com/cert.pem')[:27]!r}")

print()

# Example 2: RedisObjectStore (distributed, multi-server safe)
print("=" * 60)
print("Example 2: RedisObjectStore")
print("=" * 60)

try:
    import redis

    from certstore.stores import RedisObjectStore

    redis_client = redis.Redis(host="localhost", port=6379, db=0)
    redis_client.ping()  # Test connection

    storage = Storage(RedisObjectStore(redis_client, prefix="myapp:"), encryption_key=KEY)
    with storage.locked("example.com"):
        storage.store("example.com/cert.pem", CERT)
    print(f"Listed from Redis: {storage.list()}")

    print("\n✅ RedisObjectStore example completed successfully!")

except ImportError:
    print("⚠️  Redis not installed. Install with: pip install redis")
except Exception as e:
    print(f"⚠️  Redis not available: {e}")
    print("   Make sure Redis is running: redis-server")

print()

# Example 3: S3ObjectStore (AWS S3, MinIO, Ceph, ...)
print("=" * 60)
print("Example 3: S3ObjectStore")
print("=" * 60)

if os.environ.get("CERTSTORE_S3_ENDPOINT"):
    storage = Storage.from_s3(S3Options.from_env())
    with storage.locked("example.com", timeout=30):
        storage.store("example.com/cert.pem", CERT)
    print(f"Listed from S3: {storage.list('example.com')}")
else:
    print("⚠️  Set CERTSTORE_S3_ENDPOINT and CERTSTORE_S3_BUCKET to try S3")

print()

# Cleanup
print("Cleaning up demo files...")
file_store.clear()
os.rmdir(directory)
print("✅ Done!")
