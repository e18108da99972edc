"""
Request option encoding for the application API.

Every list/get endpoint accepts an options value made of four sections:

    include     boolean toggles, one per embeddable relation
    filters     string fields sent as ``filter[<name>]=<value>``
    sort        a literal sort key such as ``-id``
    parameters  extra query parameters such as ``page`` and ``per_page``

Section classes are plain dataclasses whose fields declare their wire name
with :func:`param`. A field holding its type's zero value (``""``, ``False``,
``0`` or ``None``) is unset and never encoded, so the zero value itself
cannot be requested.

Encoded output order is fixed: filters, ``include``, ``sort``, then
parameters, each in field declaration order.

Usage:
    opts = ListUsersOptions(
        include=IncludeUsers(servers=True),
        filters=UserFilters(username="foo"),
        sort=SORT_ID_DESC,
    )
    encode_options(opts)
    # 'filter%5Busername%5D=foo&include=servers&sort=-id'
"""

import dataclasses
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Iterator, List, Optional, Tuple
from urllib.parse import urlencode

SORT_ID_ASC = "id"
SORT_ID_DESC = "-id"
SORT_UUID_ASC = "uuid"
SORT_UUID_DESC = "-uuid"

PARAM_METADATA_KEY = "param"


def param(wire: str, default: Any = "") -> Any:
    """Declare an options field and the query name it is sent as."""
    return field(default=default, metadata={PARAM_METADATA_KEY: wire})


@lru_cache(maxsize=None)
def param_table(section_cls: type) -> Tuple[Tuple[str, str], ...]:
    """
    Get the ``(attribute, wire name)`` pairs of a section class.

    Built once per class, in declaration order.

    Raises:
        TypeError: If the class is not a dataclass
    """
    if not dataclasses.is_dataclass(section_cls):
        raise TypeError(f"{section_cls.__name__} is not an options section")
    return tuple(
        (f.name, f.metadata.get(PARAM_METADATA_KEY, f.name))
        for f in dataclasses.fields(section_cls)
    )


def _iter_set(section: Any) -> Iterator[Tuple[str, Any]]:
    """Yield ``(wire name, value)`` for every non-zero field of a section."""
    if section is None:
        return
    if isinstance(section, type) or not dataclasses.is_dataclass(section):
        raise TypeError(f"Expected an options section, got {type(section).__name__}")
    for attr, wire in param_table(type(section)):
        value = getattr(section, attr)
        if not value:
            continue
        yield wire, value


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_pairs(options: Any) -> List[Tuple[str, str]]:
    """
    Encode an options value into ordered query key/value pairs.

    Any object with ``include``, ``filters``, ``sort`` and ``parameters``
    attributes is accepted; missing attributes contribute nothing.
    """
    if options is None:
        return []

    pairs: List[Tuple[str, str]] = []

    for wire, value in _iter_set(getattr(options, "filters", None)):
        pairs.append((f"filter[{wire}]", _format_value(value)))

    includes = [
        wire for wire, value in _iter_set(getattr(options, "include", None))
        if value is True
    ]
    if includes:
        pairs.append(("include", ",".join(includes)))

    sort = getattr(options, "sort", "")
    if sort:
        pairs.append(("sort", sort))

    for wire, value in _iter_set(getattr(options, "parameters", None)):
        pairs.append((wire, _format_value(value)))

    return pairs


def encode_options(options: Any) -> str:
    """
    Encode an options value into a URL query string.

    Args:
        options: A RequestOptions value (or None)

    Returns:
        Percent-encoded query string without the leading ``?``; empty when
        nothing is set
    """
    return urlencode(encode_pairs(options))


# ========== Base Options ==========

@dataclass
class PageParameters:
    """Pagination parameters shared by list endpoints."""
    page: int = param("page", 0)
    per_page: int = param("per_page", 0)


@dataclass
class RequestOptions:
    """Base options value; endpoint options narrow the section types."""
    include: Any = None
    filters: Any = None
    sort: str = ""
    parameters: Any = None

    def encode(self) -> str:
        """Encode these options into a query string."""
        return encode_options(self)

    def with_include(self, **toggles: bool) -> "RequestOptions":
        """
        Return a copy with additional include toggles set.

        The caller's options value is left untouched.

        Raises:
            TypeError: If these options have no include section
        """
        if self.include is None:
            raise TypeError(f"{type(self).__name__} has no include section")
        include = dataclasses.replace(self.include, **toggles)
        return dataclasses.replace(self, include=include)


# ========== Users ==========

@dataclass
class IncludeUsers:
    servers: bool = param("servers", False)


@dataclass
class UserFilters:
    email: str = param("email")
    uuid: str = param("uuid")
    username: str = param("username")
    external_id: str = param("external_id")


@dataclass
class ListUsersOptions(RequestOptions):
    """Options for listing users. Sort by ``id``/``uuid``, prefix ``-`` for descending."""
    include: IncludeUsers = field(default_factory=IncludeUsers)
    filters: UserFilters = field(default_factory=UserFilters)
    sort: str = ""
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetUserOptions(RequestOptions):
    include: IncludeUsers = field(default_factory=IncludeUsers)


# ========== Servers ==========

@dataclass
class IncludeServers:
    allocations: bool = param("allocations", False)
    user: bool = param("user", False)
    subusers: bool = param("subusers", False)
    pack: bool = param("pack", False)
    nest: bool = param("nest", False)
    egg: bool = param("egg", False)
    variables: bool = param("variables", False)
    location: bool = param("location", False)
    node: bool = param("node", False)
    databases: bool = param("databases", False)


@dataclass
class ServerFilters:
    name: str = param("name")
    external_id: str = param("external_id")
    uuid: str = param("uuid")


@dataclass
class ListServersOptions(RequestOptions):
    include: IncludeServers = field(default_factory=IncludeServers)
    filters: ServerFilters = field(default_factory=ServerFilters)
    sort: str = ""
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetServerOptions(RequestOptions):
    include: IncludeServers = field(default_factory=IncludeServers)


# ========== Server Databases ==========

@dataclass
class IncludeDatabases:
    password: bool = param("password", False)
    host: bool = param("host", False)


@dataclass
class ListDatabasesOptions(RequestOptions):
    include: IncludeDatabases = field(default_factory=IncludeDatabases)
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetDatabaseOptions(RequestOptions):
    include: IncludeDatabases = field(default_factory=IncludeDatabases)


# ========== Nodes ==========

@dataclass
class IncludeNodes:
    allocations: bool = param("allocations", False)
    location: bool = param("location", False)
    servers: bool = param("servers", False)


@dataclass
class NodeFilters:
    uuid: str = param("uuid")
    name: str = param("name")
    fqdn: str = param("fqdn")


@dataclass
class ListNodesOptions(RequestOptions):
    include: IncludeNodes = field(default_factory=IncludeNodes)
    filters: NodeFilters = field(default_factory=NodeFilters)
    sort: str = ""
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetNodeOptions(RequestOptions):
    include: IncludeNodes = field(default_factory=IncludeNodes)


@dataclass
class IncludeAllocations:
    node: bool = param("node", False)
    server: bool = param("server", False)


@dataclass
class ListNodeAllocationsOptions(RequestOptions):
    include: IncludeAllocations = field(default_factory=IncludeAllocations)
    parameters: PageParameters = field(default_factory=PageParameters)


# ========== Locations ==========

@dataclass
class IncludeLocations:
    nodes: bool = param("nodes", False)
    servers: bool = param("servers", False)


@dataclass
class LocationFilters:
    short: str = param("short")
    long: str = param("long")


@dataclass
class ListLocationsOptions(RequestOptions):
    include: IncludeLocations = field(default_factory=IncludeLocations)
    filters: LocationFilters = field(default_factory=LocationFilters)
    sort: str = ""
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetLocationOptions(RequestOptions):
    include: IncludeLocations = field(default_factory=IncludeLocations)


# ========== Nests / Eggs ==========

@dataclass
class IncludeNests:
    eggs: bool = param("eggs", False)
    servers: bool = param("servers", False)


@dataclass
class ListNestsOptions(RequestOptions):
    include: IncludeNests = field(default_factory=IncludeNests)
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetNestOptions(RequestOptions):
    include: IncludeNests = field(default_factory=IncludeNests)


@dataclass
class IncludeEggs:
    nest: bool = param("nest", False)
    servers: bool = param("servers", False)
    variables: bool = param("variables", False)


@dataclass
class ListEggsOptions(RequestOptions):
    include: IncludeEggs = field(default_factory=IncludeEggs)
    parameters: PageParameters = field(default_factory=PageParameters)


@dataclass
class GetEggOptions(RequestOptions):
    include: IncludeEggs = field(default_factory=IncludeEggs)


def include_from_names(section_cls: type, names: Optional[List[str]]) -> Any:
    """
    Build an include section from relation wire names.

    Raises:
        ValueError: If a name is not a relation of the section
    """
    by_wire = {wire: attr for attr, wire in param_table(section_cls)}
    toggles = {}
    for name in names or []:
        name = name.strip()
        if not name:
            continue
        if name not in by_wire:
            valid = ", ".join(sorted(by_wire))
            raise ValueError(f"Unknown relation '{name}'. Valid relations: {valid}")
        toggles[by_wire[name]] = True
    return section_cls(**toggles)
