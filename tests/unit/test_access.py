"""Unit tests for access gates."""

from __future__ import annotations

from buildlens.bridge.access import AccessGate, AllowAllAccessGate, DenylistAccessGate


class TestAccessGates:
    def test_both_gates_satisfy_protocol(self):
        assert isinstance(AllowAllAccessGate(), AccessGate)
        assert isinstance(DenylistAccessGate([]), AccessGate)

    def test_allow_all(self):
        gate = AllowAllAccessGate()
        assert gate.can_read_sources("p", "pkg") is True
        assert gate.can_read_build_log("p", "pkg") is True

    def test_denylisted_package(self):
        gate = DenylistAccessGate(["home:alice/secret"])
        assert gate.can_read_sources("home:alice", "secret") is False
        assert gate.can_read_build_log("home:alice", "secret") is False
        assert gate.can_read_sources("home:alice", "public") is True

    def test_denylisted_project(self):
        gate = DenylistAccessGate(["home:alice"])
        assert gate.can_read_sources("home:alice", "anything") is False
        assert gate.can_read_sources("home:bob", "anything") is True
