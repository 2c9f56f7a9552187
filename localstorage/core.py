"""Cluster object types shared by the API kinds, and node-selector matching."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

NODE_NAME_FIELD = "metadata.name"

_INTEGER = re.compile(r"[+-]?\d+")


class NodeSelectorOperator(str, Enum):
    """Operators a node-selector requirement may use."""

    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"
    GT = "Gt"
    LT = "Lt"


def _parse_int(value: str) -> int | None:
    return int(value) if _INTEGER.fullmatch(value) else None


@dataclass
class NodeSelectorRequirement:
    """A key, an operator and the values the operator relates them to."""

    key: str
    operator: NodeSelectorOperator
    values: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.operator = NodeSelectorOperator(self.operator)

    def _validate(self) -> None:
        op = self.operator
        if op in (NodeSelectorOperator.IN, NodeSelectorOperator.NOT_IN) and not self.values:
            raise ValueError(f"for {op.value!r} operator, values set can't be empty")
        if op in (NodeSelectorOperator.EXISTS, NodeSelectorOperator.DOES_NOT_EXIST) and self.values:
            raise ValueError(f"values set must be empty for {op.value!r} operator")
        if op in (NodeSelectorOperator.GT, NodeSelectorOperator.LT):
            if len(self.values) != 1:
                raise ValueError(f"for {op.value!r} operator, exactly one value is required")
            if _parse_int(self.values[0]) is None:
                raise ValueError(f"for {op.value!r} operator, the value must be an integer")

    def _validate_as_field(self) -> None:
        if self.key != NODE_NAME_FIELD:
            raise ValueError(f"{self.key!r} is not a valid field selector key")
        if self.operator not in (NodeSelectorOperator.IN, NodeSelectorOperator.NOT_IN):
            raise ValueError(f"{self.operator.value!r} is not a valid field selector operator")
        if len(self.values) != 1:
            raise ValueError(
                f"unexpected number of value ({len(self.values)}) for node field selector"
            )

    def matches(self, labels: dict[str, str]) -> bool:
        """Report whether the labels satisfy this requirement; raise ValueError if it is malformed."""
        self._validate()
        op = self.operator
        present = self.key in labels
        if op is NodeSelectorOperator.IN:
            return present and labels[self.key] in self.values
        if op is NodeSelectorOperator.NOT_IN:
            return not present or labels[self.key] not in self.values
        if op is NodeSelectorOperator.EXISTS:
            return present
        if op is NodeSelectorOperator.DOES_NOT_EXIST:
            return not present
        if not present:
            return False
        actual = _parse_int(labels[self.key])
        if actual is None:
            return False
        bound = int(self.values[0])
        return actual > bound if op is NodeSelectorOperator.GT else actual < bound


@dataclass
class TypeMeta:
    """The kind and API version of an object."""

    kind: str = ""
    api_version: str = ""


@dataclass
class ObjectMeta:
    """Metadata every stored object carries."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    generation: int = 0
    creation_timestamp: datetime | None = None


@dataclass
class Node:
    """A cluster node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    type_meta: TypeMeta = field(default_factory=lambda: TypeMeta("Node", "v1"))


@dataclass
class NodeSelectorTerm:
    """Label expressions and field requirements that must all hold."""

    match_expressions: list[NodeSelectorRequirement] = field(default_factory=list)
    match_fields: list[NodeSelectorRequirement] = field(default_factory=list)

    def matches(self, node: Node) -> bool:
        """Report whether the node satisfies every requirement; an empty term matches nothing."""
        if not self.match_expressions and not self.match_fields:
            return False
        for requirement in self.match_expressions:
            requirement._validate()
        for requirement in self.match_fields:
            requirement._validate_as_field()
        labels = node.metadata.labels
        if not all(req.matches(labels) for req in self.match_expressions):
            return False
        node_name = node.metadata.name
        for req in self.match_fields:
            equal = node_name == req.values[0]
            if equal != (req.operator is NodeSelectorOperator.IN):
                return False
        return True


@dataclass
class NodeSelector:
    """A list of terms of which at least one must match."""

    node_selector_terms: list[NodeSelectorTerm] = field(default_factory=list)


@dataclass
class Toleration:
    """Lets a workload be scheduled onto nodes carrying a matching taint."""

    key: str = ""
    operator: str = ""
    value: str = ""
    effect: str = ""
    toleration_seconds: int | None = None


class PersistentVolumeMode(str, Enum):
    """How a volume is meant to be consumed."""

    BLOCK = "Block"
    FILESYSTEM = "Filesystem"


class VolumePhase(str, Enum):
    """Lifecycle phase of a persistent volume."""

    PENDING = "Pending"
    AVAILABLE = "Available"
    BOUND = "Bound"
    RELEASED = "Released"
    FAILED = "Failed"


@dataclass
class PersistentVolumeSpec:
    """Desired state of a persistent volume backed by a local path."""

    capacity: int = 0
    local_path: str = ""
    fs_type: str | None = None
    storage_class_name: str = ""
    reclaim_policy: str = ""
    volume_mode: PersistentVolumeMode | None = None
    mount_options: list[str] = field(default_factory=list)
    node_affinity: NodeSelector | None = None


@dataclass
class PersistentVolume:
    """A persistent volume and its phase."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PersistentVolumeSpec = field(default_factory=PersistentVolumeSpec)
    phase: VolumePhase | None = None
    type_meta: TypeMeta = field(default_factory=lambda: TypeMeta("PersistentVolume", "v1"))


def match_node_selector_terms(node: Node | None, node_selector: NodeSelector) -> bool:
    """Return True if any term matches the node.

    Malformed terms are skipped; if no term matches and some were malformed,
    ValueError is raised describing them.
    """
    if node is None:
        return False
    errors: list[str] = []
    for term in node_selector.node_selector_terms:
        try:
            if term.matches(node):
                return True
        except ValueError as exc:
            errors.append(str(exc))
    if errors:
        raise ValueError("; ".join(errors))
    return False


def node_selector_matches_node_labels(
    node: Node | None, node_selector: NodeSelector | None
) -> bool:
    """Report whether the node is selected; a missing selector selects every node."""
    if node_selector is None:
        return True
    if node is None:
        raise ValueError("the node is missing")
    return match_node_selector_terms(node, node_selector)