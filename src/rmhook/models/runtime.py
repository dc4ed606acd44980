"""
Runtime data models shared with the workflow engine.

These structures describe the parts of the workflow runtime that the resource
monitor hook reads and updates: the DAG file table and state log, nodes and
their categories, batch tasks, and the capability set advertised by a batch
queue. The engine owns these objects; the hook only mutates them through the
methods defined here.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from .summary import FIELD_UNITS, ResourceSummary

logger = logging.getLogger(__name__)


class FileType(Enum):
    """How the runtime treats a file declared on a task."""
    INTERMEDIATE = "intermediate"
    OUTPUT = "output"
    TEMP = "temp"
    GLOBAL = "global"


class FileState(Enum):
    """Lifecycle states of a file in the DAG file table."""
    UNKNOWN = "unknown"
    EXPECT = "expect"
    EXISTS = "exists"
    COMPLETE = "complete"
    DELETE = "delete"


class NodeState(Enum):
    """Lifecycle states of a DAG node."""
    WAITING = "waiting"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    ABORTED = "aborted"


class AllocationLabel(Enum):
    """Rungs of a category's allocation ladder."""
    FIRST = "first"
    MAX = "max"
    ERROR = "error"


class AllocationMode(Enum):
    """How a category chooses the allocation of its nodes."""
    FIXED = "fixed"
    MAX = "max"
    MIN_WASTE = "min_waste"
    MAX_THROUGHPUT = "max_throughput"


@dataclass(frozen=True)
class BatchQueue:
    """
    A batch queue as seen by a hook: a type name and a set of features.

    Known features include ``remote_rename`` (input files may be staged under
    a different name on the execution host) and ``output_directories``
    (output paths keep their directory structure on the execution host).
    """

    type: str = "local"
    features: FrozenSet[str] = frozenset()

    def supports_feature(self, name: str) -> bool:
        return name in self.features


@dataclass
class TaskInfo:
    """Completion information reported by the batch system for a task."""

    exited_normally: bool = True
    exit_code: int = 0
    exit_signal: int = 0
    disk_allocation_exhausted: bool = False


@dataclass
class DagFile:
    """An entry of the DAG file table."""

    filename: str
    type: FileType = FileType.INTERMEDIATE
    state: FileState = FileState.UNKNOWN


@dataclass
class TaskFile:
    """A file declared on a batch task, with its name on the execution host."""

    file: DagFile
    remote_name: str


@dataclass
class BatchTask:
    """
    The unit of work submitted to a batch queue for a node.

    Declared inputs and outputs are keyed by (local name, remote name), so
    declaring the same file twice leaves a single entry.
    """

    command: str
    task_id: int = 0
    inputs: List[TaskFile] = field(default_factory=list)
    outputs: List[TaskFile] = field(default_factory=list)
    info: TaskInfo = field(default_factory=TaskInfo)

    def add_input(self, file: DagFile, remote_name: Optional[str] = None) -> TaskFile:
        return self._add(self.inputs, file, remote_name)

    def add_output(self, file: DagFile, remote_name: Optional[str] = None) -> TaskFile:
        return self._add(self.outputs, file, remote_name)

    @staticmethod
    def _add(files: List[TaskFile], file: DagFile, remote_name: Optional[str]) -> TaskFile:
        remote = remote_name or file.filename
        for existing in files:
            if existing.file.filename == file.filename and existing.remote_name == remote:
                return existing
        entry = TaskFile(file=file, remote_name=remote)
        files.append(entry)
        return entry

    def input_names(self) -> List[str]:
        return [f.file.filename for f in self.inputs]

    def output_names(self) -> List[str]:
        return [f.file.filename for f in self.outputs]

    def set_command(self, command: str) -> None:
        self.command = command

    def wrap_command(self, wrapper: str) -> None:
        """Wrap the current command so it runs inside ``wrapper``."""
        # system.commands imports this module.
        from ..system.commands import wrap_command

        self.command = wrap_command(self.command, wrapper)


@dataclass
class Category:
    """
    A named class of nodes sharing a resource model.

    The category keeps a running aggregate over completed measurements and
    answers which allocation a node should use after an overflow.
    """

    name: str
    allocation_mode: AllocationMode = AllocationMode.MAX
    first_allocation: Optional[ResourceSummary] = None
    max_allocation: Optional[ResourceSummary] = None
    measurements: List[ResourceSummary] = field(default_factory=list)
    max_measured: Dict[str, float] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.measurements)

    def accumulate_summary(self, summary: ResourceSummary) -> None:
        """Fold a completed measurement into the running aggregate."""
        self.measurements.append(summary)
        for name, value in summary.measured_fields().items():
            if value > self.max_measured.get(name, float("-inf")):
                self.max_measured[name] = value
        logger.debug(f"Category '{self.name}' accumulated measurement #{self.count}")

    def mean(self, name: str) -> Optional[float]:
        if name not in FIELD_UNITS:
            raise KeyError(f"Unknown resource field: {name}")
        values = [getattr(s, name) for s in self.measurements if getattr(s, name) is not None]
        if not values:
            return None
        return sum(values) / len(values)

    def next_label(
        self,
        current: AllocationLabel,
        overflow: bool,
        requested: Optional[ResourceSummary] = None,
        measured: Optional[ResourceSummary] = None,
    ) -> AllocationLabel:
        """
        Return the allocation a node should move to.

        Without an overflow the current label stands. On overflow a node
        climbs from FIRST to MAX; a node already at MAX, a FIXED category, or
        an overflow of a limit the user set explicitly yields ERROR.
        """
        if not overflow:
            return current

        if self.allocation_mode is AllocationMode.FIXED:
            return AllocationLabel.ERROR

        if current is not AllocationLabel.FIRST:
            return AllocationLabel.ERROR

        if measured is not None and measured.limits_exceeded is not None and requested is not None:
            exceeded = set(measured.limits_exceeded.measured_fields())
            exceeded.update(measured.limits_exceeded.extra)
            for name in exceeded:
                if name in FIELD_UNITS and getattr(requested, name) is not None:
                    return AllocationLabel.ERROR

        return AllocationLabel.MAX

    def allocation_for(self, label: AllocationLabel) -> Optional[ResourceSummary]:
        if label is AllocationLabel.MAX:
            return self.max_allocation
        if label is AllocationLabel.FIRST:
            return self.first_allocation or self.max_allocation
        return None


@dataclass
class StateChange:
    """A record of the in-memory state log."""

    kind: str
    name: str
    state: str


@dataclass
class Dag:
    """The workflow graph: its file table and state change log."""

    files: Dict[str, DagFile] = field(default_factory=dict)
    nodes: Dict[int, "DagNode"] = field(default_factory=dict)
    categories: Dict[str, Category] = field(default_factory=dict)
    state_log: List[StateChange] = field(default_factory=list)

    def lookup_or_create_file(self, filename: str, type: FileType = FileType.INTERMEDIATE) -> DagFile:
        dag_file = self.files.get(filename)
        if dag_file is None:
            dag_file = DagFile(filename=filename, type=type)
            self.files[filename] = dag_file
        return dag_file

    def lookup_or_create_category(self, name: str) -> Category:
        category = self.categories.get(name)
        if category is None:
            category = Category(name=name)
            self.categories[name] = category
        return category

    def add_node(self, node: "DagNode") -> "DagNode":
        node.dag = self
        self.nodes[node.node_id] = node
        return node

    def log_file_state_change(self, dag_file: DagFile, state: FileState) -> None:
        dag_file.state = state
        self.state_log.append(StateChange("file", dag_file.filename, state.value))
        logger.debug(f"File {dag_file.filename} -> {state.value}")

    def log_state_change(self, node: "DagNode", state: NodeState) -> None:
        node.state = state
        self.state_log.append(StateChange("node", str(node.node_id), state.value))
        logger.debug(f"Node {node.node_id} -> {state.value}")

    def add_input_file(self, task: BatchTask, local_name: str, remote_name: Optional[str],
                       type: FileType) -> DagFile:
        """Declare ``local_name`` as an input of ``task`` and register it in the file table."""
        dag_file = self.lookup_or_create_file(local_name, type)
        dag_file.type = type
        task.add_input(dag_file, remote_name)
        return dag_file

    def add_output_file(self, task: BatchTask, local_name: str, remote_name: Optional[str],
                        type: FileType) -> DagFile:
        """Declare ``local_name`` as an output of ``task`` and register it in the file table."""
        dag_file = self.lookup_or_create_file(local_name, type)
        dag_file.type = type
        task.add_output(dag_file, remote_name)
        return dag_file


@dataclass
class DagNode:
    """A single rule of the workflow."""

    node_id: int
    command: str
    category: Category
    queue: BatchQueue = field(default_factory=BatchQueue)
    dag: Optional[Dag] = field(default=None, repr=False, compare=False)
    state: NodeState = NodeState.WAITING
    resource_request: AllocationLabel = AllocationLabel.FIRST
    resources_requested: Optional[ResourceSummary] = None
    resources_measured: Optional[ResourceSummary] = None

    def dynamic_label(self) -> Optional[ResourceSummary]:
        """
        Resource limits for the node's current allocation.

        Values set explicitly on the node win; the rest come from the
        category's allocation for the current label.
        """
        allocation = self.category.allocation_for(self.resource_request)
        if self.resources_requested is None:
            return allocation
        return self.resources_requested.merge(allocation)


def limits_to_options(limits: Optional[ResourceSummary]) -> List[Tuple[str, str]]:
    """Return (name, "value unit") pairs for every limit set in ``limits``."""
    if limits is None:
        return []
    pairs = []
    for name, value in limits.measured_fields().items():
        number = str(int(value)) if float(value).is_integer() else str(value)
        pairs.append((name, f"{number} {FIELD_UNITS[name]}"))
    return pairs
