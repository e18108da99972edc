"""
Domain entities returned by the application API.

Entities are pydantic models built from an envelope's attributes. Scalar
fields read the attribute of the same name unless they declare a wire
name with ``Field(alias=...)``. Relationship fields declare the relation
name and target entity with :func:`relation` and are never read from
attributes.

A missing attribute, or a ``null`` one on a field that is not Optional,
keeps the field's natural default. Values of the wrong type are rejected.

Relationship fields are filled by :mod:`pteroctl.resolver`:
plural relations default to an empty list, singular ones to None.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator
from pydantic.fields import FieldInfo

from .exceptions import ResponseShapeError

RELATION_KEY = "relation"

E = TypeVar("E", bound="Entity")

_ENTITIES: Dict[str, Type["Entity"]] = {}


@dataclass(frozen=True)
class RelationSpec:
    """Declaration of one relationship field."""
    name: str
    target: str
    many: bool = False

    @property
    def entity_cls(self) -> Type["Entity"]:
        return _ENTITIES[self.target]


def relation(name: str, target: str, many: bool = False) -> Any:
    """Declare a relationship field resolved from relation ``name``."""
    extra = {RELATION_KEY: RelationSpec(name, target, many)}
    if many:
        return Field(default_factory=list, repr=False, json_schema_extra=extra)
    return Field(default=None, repr=False, json_schema_extra=extra)


def _relation_spec(info: FieldInfo) -> Optional[RelationSpec]:
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        return extra.get(RELATION_KEY)
    return None


class Entity(BaseModel):
    """Base class for API entities."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        _ENTITIES[cls.__name__] = cls

    @model_validator(mode="before")
    @classmethod
    def read_wire_attributes(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        values: Dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            if _relation_spec(info) is not None:
                continue
            wire = info.alias or name
            if wire in data:
                value = data[wire]
            elif name in data:
                value = data[name]
            else:
                continue
            # null on a non-Optional field keeps the default
            if value is None and info.default is not None:
                continue
            values[name] = value
        return values

    @classmethod
    def from_attributes(cls: Type[E], attributes: Mapping[str, Any]) -> E:
        """
        Build an entity from a flat attribute mapping.

        Relationship fields are left at their defaults.

        Raises:
            ResponseShapeError: If attributes is not a mapping or a value
                has the wrong type
        """
        if not isinstance(attributes, Mapping):
            raise ResponseShapeError(
                f"{cls.__name__} attributes must be an object, got {type(attributes).__name__}"
            )

        try:
            return cls.model_validate(attributes)
        except pydantic.ValidationError as e:
            raise ResponseShapeError(
                f"Invalid attributes for {cls.__name__}",
                details=str(e)
            ) from e

    @classmethod
    def relations(cls) -> Tuple[Tuple[str, RelationSpec], ...]:
        """Get the ``(field name, spec)`` pairs of all relationship fields."""
        return _relation_table(cls)


@lru_cache(maxsize=None)
def _relation_table(entity_cls: Type[Entity]) -> Tuple[Tuple[str, RelationSpec], ...]:
    table = []
    for name, info in entity_cls.model_fields.items():
        spec = _relation_spec(info)
        if spec is not None:
            table.append((name, spec))
    return tuple(table)


# ========== Users ==========

class User(Entity):
    id: int = 0
    external_id: Optional[str] = None
    uuid: str = ""
    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    language: str = ""
    root_admin: StrictBool = False
    two_factor: StrictBool = Field(default=False, alias="2fa")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    servers: List["Server"] = relation("servers", "Server", many=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def update_descriptor(self) -> Dict[str, Any]:
        """Current values as an update request body."""
        return {
            "external_id": self.external_id,
            "email": self.email,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "language": self.language,
            "root_admin": self.root_admin,
        }


# ========== Servers ==========

class Limits(Entity):
    memory: int = 0
    swap: int = 0
    disk: int = 0
    io: int = 0
    cpu: int = 0
    threads: Optional[str] = None
    oom_disabled: StrictBool = False


class FeatureLimits(Entity):
    databases: int = 0
    allocations: int = 0
    backups: int = 0


class Container(Entity):
    startup_command: str = ""
    image: str = ""
    installed: int = 0
    environment: Dict[str, Any] = Field(default_factory=dict)


class Server(Entity):
    id: int = 0
    external_id: Optional[str] = None
    uuid: str = ""
    identifier: str = ""
    name: str = ""
    description: str = ""
    status: Optional[str] = None
    suspended: StrictBool = False
    limits: Limits = Field(default_factory=Limits)
    feature_limits: FeatureLimits = Field(default_factory=FeatureLimits)
    user_id: int = Field(default=0, alias="user")
    node_id: int = Field(default=0, alias="node")
    allocation_id: int = Field(default=0, alias="allocation")
    nest_id: int = Field(default=0, alias="nest")
    egg_id: int = Field(default=0, alias="egg")
    container: Container = Field(default_factory=Container)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    allocations: List["Allocation"] = relation("allocations", "Allocation", many=True)
    user: Optional[User] = relation("user", "User")
    subusers: List[User] = relation("subusers", "User", many=True)
    location: Optional["Location"] = relation("location", "Location")
    node: Optional["Node"] = relation("node", "Node")
    nest: Optional["Nest"] = relation("nest", "Nest")
    egg: Optional["Egg"] = relation("egg", "Egg")
    variables: List["EggVariable"] = relation("variables", "EggVariable", many=True)
    databases: List["Database"] = relation("databases", "Database", many=True)

    def details_descriptor(self) -> Dict[str, Any]:
        """Current details as an update-details request body."""
        return {
            "external_id": self.external_id,
            "name": self.name,
            "user": self.user_id,
            "description": self.description,
        }

    def build_descriptor(self) -> Dict[str, Any]:
        """Current build settings as an update-build request body."""
        return {
            "allocation": self.allocation_id,
            "oom_disabled": self.limits.oom_disabled,
            "limits": {
                "memory": self.limits.memory,
                "swap": self.limits.swap,
                "disk": self.limits.disk,
                "io": self.limits.io,
                "cpu": self.limits.cpu,
                "threads": self.limits.threads,
            },
            "add_allocations": [],
            "remove_allocations": [],
            "feature_limits": {
                "databases": self.feature_limits.databases,
                "allocations": self.feature_limits.allocations,
                "backups": self.feature_limits.backups,
            },
        }

    def startup_descriptor(self) -> Dict[str, Any]:
        """Current startup settings as an update-startup request body."""
        return {
            "startup": self.container.startup_command,
            "environment": dict(self.container.environment),
            "egg": self.egg_id,
            "image": self.container.image,
            "skip_scripts": False,
        }


# ========== Databases ==========

class DatabasePassword(Entity):
    password: str = ""


class DatabaseHost(Entity):
    id: int = 0
    name: str = ""
    host: str = ""
    port: int = 0
    username: str = ""
    node: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Database(Entity):
    id: int = 0
    server_id: int = Field(default=0, alias="server")
    host_id: int = Field(default=0, alias="host")
    database: str = ""
    username: str = ""
    remote: str = ""
    max_connections: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    password: Optional[DatabasePassword] = relation("password", "DatabasePassword")
    host: Optional[DatabaseHost] = relation("host", "DatabaseHost")


# ========== Nodes ==========

class Node(Entity):
    id: int = 0
    uuid: str = ""
    public: StrictBool = False
    name: str = ""
    description: str = ""
    location_id: int = 0
    fqdn: str = ""
    scheme: str = ""
    behind_proxy: StrictBool = False
    maintenance_mode: StrictBool = False
    memory: int = 0
    memory_overallocate: int = 0
    disk: int = 0
    disk_overallocate: int = 0
    upload_size: int = 0
    daemon_listen: int = 0
    daemon_sftp: int = 0
    daemon_base: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    allocations: List["Allocation"] = relation("allocations", "Allocation", many=True)
    location: Optional["Location"] = relation("location", "Location")
    servers: List[Server] = relation("servers", "Server", many=True)

    def update_descriptor(self) -> Dict[str, Any]:
        """Current settings as an update request body."""
        return {
            "name": self.name,
            "description": self.description,
            "location_id": self.location_id,
            "public": self.public,
            "fqdn": self.fqdn,
            "scheme": self.scheme,
            "behind_proxy": self.behind_proxy,
            "memory": self.memory,
            "memory_overallocate": self.memory_overallocate,
            "disk": self.disk,
            "disk_overallocate": self.disk_overallocate,
            "daemon_base": self.daemon_base,
            "daemon_sftp": self.daemon_sftp,
            "daemon_listen": self.daemon_listen,
            "upload_size": self.upload_size,
        }


class NodeConfiguration(Entity):
    """Wings daemon configuration; returned without an envelope."""
    debug: StrictBool = False
    uuid: str = ""
    token_id: str = ""
    token: str = ""
    api: Dict[str, Any] = Field(default_factory=dict)
    system: Dict[str, Any] = Field(default_factory=dict)
    allowed_mounts: List[str] = Field(default_factory=list)
    remote: str = ""


class Allocation(Entity):
    id: int = 0
    ip: str = ""
    alias: Optional[str] = None
    port: int = 0
    notes: Optional[str] = None
    assigned: StrictBool = False
    node: Optional[Node] = relation("node", "Node")
    server: Optional[Server] = relation("server", "Server")


# ========== Locations ==========

class Location(Entity):
    id: int = 0
    short: str = ""
    long: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    nodes: List[Node] = relation("nodes", "Node", many=True)
    servers: List[Server] = relation("servers", "Server", many=True)


# ========== Nests / Eggs ==========

class Nest(Entity):
    id: int = 0
    uuid: str = ""
    author: str = ""
    name: str = ""
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    eggs: List["Egg"] = relation("eggs", "Egg", many=True)
    servers: List[Server] = relation("servers", "Server", many=True)


class EggVariable(Entity):
    id: int = 0
    egg_id: int = 0
    name: str = ""
    description: str = ""
    env_variable: str = ""
    default_value: str = ""
    user_viewable: StrictBool = False
    user_editable: StrictBool = False
    rules: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Egg(Entity):
    id: int = 0
    uuid: str = ""
    name: str = ""
    nest_id: int = Field(default=0, alias="nest")
    author: str = ""
    description: Optional[str] = None
    docker_image: str = ""
    docker_images: Dict[str, str] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)
    startup: str = ""
    script: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    nest: Optional[Nest] = relation("nest", "Nest")
    servers: List[Server] = relation("servers", "Server", many=True)
    variables: List[EggVariable] = relation("variables", "EggVariable", many=True)


for _entity in _ENTITIES.values():
    _entity.model_rebuild()
