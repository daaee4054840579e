"""Tests for object key naming."""

import pytest

from certstore.keys import ObjectNamer


def test_object_key_without_prefix():
    """Test that an empty prefix leaves keys unchanged."""
    namer = ObjectNamer()

    assert namer.object_key("certA/cert.pem") == "certA/cert.pem"
    assert namer.lock_key("certA") == "certA.lock"


def test_object_key_with_prefix():
    """Test that keys are placed under the prefix."""
    namer = ObjectNamer("acme")

    assert namer.object_key("certA/cert.pem") == "acme/certA/cert.pem"
    assert namer.lock_key("certA") == "acme/certA.lock"


def test_prefix_slashes_are_ignored():
    """Test that surrounding slashes on the prefix don't double up."""
    assert ObjectNamer("/acme/").object_key("a") == "acme/a"
    assert ObjectNamer("acme/prod/").object_key("a") == "acme/prod/a"
    assert ObjectNamer("/").object_key("a") == "a"


def test_same_prefix_same_keys():
    """Test that two namers with the same prefix agree."""
    assert ObjectNamer("acme").lock_key("a") == ObjectNamer("acme").lock_key("a")


def test_lock_key_follows_object_key():
    """Test that the lock record sits next to the object it protects."""
    namer = ObjectNamer("acme")

    assert namer.lock_key("a.com") == namer.object_key("a.com") + ".lock"


def test_relative_key_round_trip():
    """Test that relative_key undoes object_key."""
    for prefix in ("", "acme", "acme/prod"):
        namer = ObjectNamer(prefix)
        assert namer.relative_key(namer.object_key("a.com/cert.pem")) == "a.com/cert.pem"


def test_relative_key_outside_prefix():
    """Test that foreign object keys are refused."""
    with pytest.raises(ValueError):
        ObjectNamer("acme").relative_key("other/a.com")
