"""Value types for pestr: job geometry, node reservation, search and config settings."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field, model_validator

from pestr.errors import InvalidGeometry

DEFAULT_CPUS_PER_NODE = 128
DEFAULT_SEARCH_CONSERVE_NODES = False
DEFAULT_SEARCH_PE_RADIUS = 0.25
DEFAULT_SEARCH_THREAD_RADIUS = 0.5


def check_geometry(cpus_per_node: int, hyperthreading: bool, tasks: int, threads: int) -> None:
    """Raise InvalidGeometry naming the first constraint the shape breaks."""
    if cpus_per_node <= 0:
        raise InvalidGeometry("CPUs per node must be > 0")
    if tasks <= 0 or threads <= 0:
        raise InvalidGeometry("tasks and threads must be > 0")
    if threads > logical_cpus_per_node(cpus_per_node, hyperthreading):
        raise InvalidGeometry("threads cannot exceed CPUs per node")


def logical_cpus_per_node(cpus_per_node: int, hyperthreading: bool) -> int:
    return cpus_per_node * 2 if hyperthreading else cpus_per_node


class Geometry(BaseModel):
    """Parallel shape of a job (tasks x threads) on nodes with cpus_per_node cores.

    Immutable. Construction validates the shape and raises InvalidGeometry
    (not a pydantic ValidationError) when it cannot be placed on a node.
    Fields are strict: only real ints and bools are accepted.
    """
    model_config = ConfigDict(frozen=True, strict=True)

    cpus_per_node: int = Field(..., description="Physical cores per node")
    hyperthreading: bool = Field(False, description="Two logical cores per physical core")
    tasks: int = Field(..., description="Parallel execution units (PEs / MPI ranks)")
    threads: int = Field(..., description="Threads per task")

    _logical_cpus: int = PrivateAttr(0)

    def model_post_init(self, __context: Any) -> None:
        self._logical_cpus = logical_cpus_per_node(self.cpus_per_node, self.hyperthreading)

    @model_validator(mode="after")
    def validate_shape(self) -> "Geometry":
        check_geometry(self.cpus_per_node, self.hyperthreading, self.tasks, self.threads)
        return self

    @classmethod
    def new(cls, cpus_per_node: int, hyperthreading: bool, tasks: int, threads: int) -> "Geometry":
        """Validating factory; every Geometry in pestr is built here."""
        return cls(
            cpus_per_node=cpus_per_node,
            hyperthreading=hyperthreading,
            tasks=tasks,
            threads=threads,
        )

    @computed_field
    @property
    def logical_cpus(self) -> int:
        """Schedulable cores per node (doubled with hyperthreading), fixed at construction."""
        return self._logical_cpus


class Reservation(BaseModel):
    """Nodes and cores reserved for a Geometry."""
    model_config = ConfigDict(frozen=True)

    nodes: int = Field(..., ge=1)
    cpus: int = Field(..., ge=1, description="Logical cores reserved (nodes x logical_cpus)")
    used_cpus: int = Field(..., ge=1, description="Logical cores occupied by the job")
    idle_cpus: int = Field(..., ge=0)
    partial_nodes: int = Field(..., ge=0, description="Reserved nodes that are not fully occupied")

    @computed_field
    @property
    def is_filled(self) -> bool:
        return self.used_cpus == self.cpus

    @classmethod
    def from_geometry(cls, geometry: Geometry) -> "Reservation":
        from pestr.packing import compute_reservation
        return compute_reservation(geometry)


class SearchOptions(BaseModel):
    """Parameters of the alternate geometry search."""
    conserve_nodes: bool = Field(DEFAULT_SEARCH_CONSERVE_NODES, description="Only suggest geometries with the same node count")
    pe_radius: float = Field(DEFAULT_SEARCH_PE_RADIUS, ge=0, allow_inf_nan=False, description="Task search radius as a fraction of tasks")
    thread_radius: float = Field(DEFAULT_SEARCH_THREAD_RADIUS, ge=0, allow_inf_nan=False, description="Thread search radius as a fraction of threads")


class Config(BaseModel):
    """Resolved settings handed to the CLI."""
    cpus_per_node: int = Field(DEFAULT_CPUS_PER_NODE, ge=1, description="Physical cores per node on the target machine")
    search: SearchOptions = Field(default_factory=SearchOptions)


class FileSearchConfig(BaseModel):
    """[search] table of the configuration file; unset keys stay None."""
    conserve_nodes: bool | None = None
    pe_radius: float | None = Field(None, ge=0, allow_inf_nan=False)
    thread_radius: float | None = Field(None, ge=0, allow_inf_nan=False)


class FileConfig(BaseModel):
    """Configuration file contents; unset keys stay None."""
    cpus_per_node: int | None = Field(None, ge=1)
    search: FileSearchConfig = Field(default_factory=FileSearchConfig)


class JobPlan(BaseModel):
    """A geometry together with its reservation."""
    geometry: Geometry
    reservation: Reservation


class ReservationReport(BaseModel):
    """Structured output: requested job, its reservation and filled alternatives."""
    geometry: Geometry
    reservation: Reservation
    alternatives: list[JobPlan] = Field(default_factory=list)
