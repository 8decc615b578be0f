"""Task packing and node reservation (pure functions, no I/O)."""
from pestr.models import Geometry, Reservation


def node_loads(geometry: Geometry) -> list[int]:
    """
    Occupied logical cores on each reserved node.
    Nodes are filled with as many whole tasks as fit (logical_cpus // threads);
    leftover tasks go on one trailing node.
    """
    tasks_per_node = geometry.logical_cpus // geometry.threads
    full_nodes = geometry.tasks // tasks_per_node
    remainder = geometry.tasks - full_nodes * tasks_per_node
    loads = [tasks_per_node * geometry.threads] * full_nodes
    if remainder > 0:
        loads.append(remainder * geometry.threads)
    return loads


def compute_reservation(geometry: Geometry) -> Reservation:
    """
    Reserve whole nodes for the geometry.
    cpus = nodes * logical_cpus, used_cpus = sum(node loads), idle_cpus = cpus - used_cpus
    """
    loads = node_loads(geometry)
    logical_cpus = geometry.logical_cpus
    nodes = len(loads)
    cpus = nodes * logical_cpus
    used_cpus = sum(loads)

    if used_cpus == cpus:
        return Reservation(
            nodes=nodes,
            cpus=cpus,
            used_cpus=cpus,
            idle_cpus=0,
            partial_nodes=0,
        )

    # Every node is partial when threads does not divide logical_cpus.
    partial_nodes = sum(1 for load in loads if load < logical_cpus)
    return Reservation(
        nodes=nodes,
        cpus=cpus,
        used_cpus=used_cpus,
        idle_cpus=cpus - used_cpus,
        partial_nodes=partial_nodes,
    )
