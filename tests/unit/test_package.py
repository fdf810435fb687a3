"""Tests for package metadata."""

from importlib.metadata import version

import mediblood


def test_version_matches_distribution():
    assert mediblood.__version__ == version("mediblood-order-desk")


def test_no_placeholder_contact_metadata():
    assert not hasattr(mediblood, "__email__")
    assert not hasattr(mediblood, "__author__")
