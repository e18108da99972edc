"""
Tests for domain entities.
"""

from datetime import datetime, timezone

import pytest

from pteroctl.exceptions import ResponseShapeError
from pteroctl.models import (
    Egg,
    Node,
    RelationSpec,
    Server,
    User,
)


class TestFromAttributes:
    """Tests for Entity.from_attributes."""

    def test_missing_attributes_use_defaults(self):
        """Test absent attributes keep natural defaults."""
        user = User.from_attributes({"id": 1})
        assert user.username == ""
        assert user.external_id is None
        assert user.servers == []

    def test_wire_names(self):
        """Test attributes read from renamed wire keys."""
        server = Server.from_attributes({"user": 3, "node": 4, "egg": 9, "allocation": 12})
        assert (server.user_id, server.node_id, server.egg_id, server.allocation_id) == (3, 4, 9, 12)
        assert server.user is None

    def test_nested_values(self):
        """Test nested attribute objects become entities."""
        server = Server.from_attributes({
            "limits": {"memory": 2048, "cpu": 200, "threads": None},
            "container": {"image": "ghcr.io/example:java", "environment": {"EULA": "true"}},
        })
        assert server.limits.memory == 2048
        assert server.limits.threads is None
        assert server.container.environment == {"EULA": "true"}

    def test_datetimes(self):
        """Test timestamps are parsed."""
        node = Node.from_attributes({"created_at": "2024-01-02T03:04:05+00:00"})
        assert node.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_rejects_non_mapping(self):
        """Test non-object attributes are rejected."""
        with pytest.raises(ResponseShapeError):
            User.from_attributes(["id", 1])

    def test_relationships_key_ignored(self):
        """Test relation fields are never filled from attributes."""
        egg = Egg.from_attributes({"id": 1, "nest": 2, "variables": [{"id": 1}]})
        assert egg.nest_id == 2
        assert egg.nest is None
        assert egg.variables == []


class TestRelations:
    """Tests for relation declarations."""

    def test_declared_relations(self):
        """Test relation specs in declaration order."""
        names = [name for name, _ in User.relations()]
        assert names == ["servers"]
        assert dict(Node.relations())["location"] == RelationSpec("location", "Location")

    def test_target_lookup(self):
        """Test relation targets resolve to entity classes."""
        spec = dict(Server.relations())["subusers"]
        assert spec.many
        assert spec.entity_cls is User


class TestDescriptors:
    """Tests for update descriptors."""

    def test_user_update_descriptor(self):
        """Test a user's current values as an update body."""
        user = User.from_attributes({
            "email": "a@example.com", "username": "a", "first_name": "A",
            "last_name": "B", "language": "en", "root_admin": True,
        })
        body = user.update_descriptor()
        assert body["email"] == "a@example.com"
        assert body["root_admin"] is True
        assert user.full_name == "A B"

    def test_server_build_descriptor(self):
        """Test build body mirrors current limits."""
        server = Server.from_attributes({
            "allocation": 7,
            "limits": {"memory": 1024, "swap": 0, "disk": 4096, "io": 500, "cpu": 100, "oom_disabled": True},
            "feature_limits": {"databases": 2, "allocations": 1, "backups": 3},
        })
        body = server.build_descriptor()
        assert body["allocation"] == 7
        assert body["oom_disabled"] is True
        assert body["limits"]["disk"] == 4096
        assert body["feature_limits"]["backups"] == 3

    def test_server_startup_descriptor(self):
        """Test startup body mirrors the container."""
        server = Server.from_attributes({
            "egg": 5,
            "container": {"startup_command": "java -jar server.jar", "image": "img", "environment": {"A": "1"}},
        })
        body = server.startup_descriptor()
        assert body == {
            "startup": "java -jar server.jar",
            "environment": {"A": "1"},
            "egg": 5,
            "image": "img",
            "skip_scripts": False,
        }


class TestAttributeTypes:
    """Tests for attribute type checking and null handling."""

    def test_zulu_timestamp(self):
        """Test a trailing Z is read as UTC."""
        user = User.from_attributes({"created_at": "2024-05-01T00:00:00Z"})
        assert user.created_at == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_null_timestamp(self):
        """Test a null timestamp stays None."""
        assert User.from_attributes({"updated_at": None}).updated_at is None

    @pytest.mark.parametrize("attributes", [
        {"id": "abc"},
        {"root_admin": "yes"},
        {"root_admin": 1},
        {"username": 42},
        {"created_at": "yesterday"},
    ])
    def test_wrong_types_rejected(self, attributes):
        """Test values of the wrong type raise ResponseShapeError."""
        with pytest.raises(ResponseShapeError, match="Invalid attributes for User"):
            User.from_attributes(attributes)

    def test_nested_wrong_type_rejected(self):
        """Test nested objects are type checked too."""
        with pytest.raises(ResponseShapeError):
            Server.from_attributes({"limits": {"memory": "lots"}})

    def test_null_nested_objects_use_defaults(self):
        """Test null limits, feature limits and container keep empty values."""
        server = Server.from_attributes({
            "id": 1, "limits": None, "feature_limits": None, "container": None,
        })

        assert server.limits.memory == 0
        assert server.feature_limits.databases == 0
        assert server.container.environment == {}
        assert server.build_descriptor()["limits"]["memory"] == 0
        assert server.startup_descriptor()["startup"] == ""

    def test_null_string_uses_default(self):
        """Test a null non-optional string falls back to empty."""
        node = Node.from_attributes({"description": None})
        assert node.description == ""
