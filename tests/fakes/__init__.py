"""Test fakes and payload builders for client testing."""

from tests.fakes.fake_transport import FakeTransport

__all__ = ["FakeTransport"]
