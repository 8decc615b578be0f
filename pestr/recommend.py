"""Alternate geometry search: bounded grid around the requested job shape."""
import logging
import math
import struct
from typing import Callable

from pestr.errors import InvalidGeometry
from pestr.models import Geometry, Reservation
from pestr.packing import compute_reservation

_LOG = logging.getLogger(__name__)

# Decides whether a filled candidate is offered to the user. Must be pure.
GeometryFilter = Callable[[Geometry, Reservation], bool]

_F32_MAX = 3.4028234663852886e38
_I64_MAX = 2**63 - 1


def accept_all(geometry: Geometry, reservation: Reservation) -> bool:
    return True


def same_node_count(base: Reservation) -> GeometryFilter:
    """Filter accepting only candidates that reserve as many nodes as base."""
    def _accept(geometry: Geometry, reservation: Reservation) -> bool:
        return reservation.nodes == base.nodes
    return _accept


def build_filter(conserve_nodes: bool, base: Reservation) -> GeometryFilter:
    return same_node_count(base) if conserve_nodes else accept_all


def _f32(x: float) -> float:
    """Round to the nearest 32-bit float; magnitudes past the f32 range become inf."""
    if math.isnan(x) or math.isinf(x):
        return x
    if abs(x) > _F32_MAX:
        return math.copysign(math.inf, x)
    return struct.unpack("f", struct.pack("f", x))[0]


def _truncate(x: float) -> int:
    """Truncate toward zero, saturating non-finite values (nan -> 0)."""
    if math.isnan(x):
        return 0
    if math.isinf(x):
        return _I64_MAX if x > 0 else -_I64_MAX - 1
    return int(x)


def search_deltas(geometry: Geometry, task_radius: float, thread_radius: float) -> tuple[int, int]:
    """
    Integer search half-widths: floor(radius * count) with radius and count
    as 32-bit floats, so 0.29 * 100 gives 29 (float64 gives 28.999...).
    Radii below 1/count give 0.
    """
    task_delta = _f32(_f32(task_radius) * _f32(geometry.tasks))
    thread_delta = _f32(_f32(thread_radius) * _f32(geometry.threads))
    return _truncate(task_delta), _truncate(thread_delta)


def alternates(
    geometry: Geometry,
    task_radius: float,
    thread_radius: float,
    accept: GeometryFilter = accept_all,
) -> list[tuple[Geometry, Reservation]]:
    """
    Geometries near `geometry` whose reservation is completely filled.
    Tasks range over tasks +/- task_radius * tasks and threads over
    threads +/- thread_radius * threads; cpus_per_node and hyperthreading stay fixed.
    Result is sorted by node count; ties keep (tasks, threads) ascending order.
    """
    task_delta, thread_delta = search_deltas(geometry, task_radius, thread_radius)
    logical_cpus = geometry.logical_cpus
    found: list[tuple[Geometry, Reservation]] = []
    searched = 0

    # Offsets that would push tasks or threads out of range are never generated.
    task_offsets = range(max(-task_delta, 1 - geometry.tasks), task_delta + 1)
    thread_offsets = range(
        max(-thread_delta, 1 - geometry.threads),
        min(thread_delta, logical_cpus - geometry.threads) + 1,
    )

    for task_offset in task_offsets:
        tasks = geometry.tasks + task_offset
        if tasks < 1:
            continue
        for thread_offset in thread_offsets:
            threads = geometry.threads + thread_offset
            if threads < 1 or threads > logical_cpus:
                continue
            try:
                candidate = Geometry.new(geometry.cpus_per_node, geometry.hyperthreading, tasks, threads)
            except InvalidGeometry as e:
                raise RuntimeError(f"search produced an invalid geometry {tasks} x {threads}: {e}") from e
            searched += 1
            res = compute_reservation(candidate)
            if res.is_filled and accept(candidate, res):
                found.append((candidate, res))

    found.sort(key=lambda pair: pair[1].nodes)
    _LOG.debug(
        "searched %d geometries around %d x %d (task_delta=%d, thread_delta=%d); %d fill their reservation",
        searched, geometry.tasks, geometry.threads, task_delta, thread_delta, len(found),
    )
    return found
