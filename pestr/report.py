"""Render a reservation and its alternate geometries as plain text or JSON."""
from pestr.models import Geometry, JobPlan, Reservation, ReservationReport


def _reservation_lines(res: Reservation) -> list[str]:
    lines = [f"{res.nodes} nodes ({res.cpus} CPU cores)"]
    if not res.is_filled:
        lines.append("warning: reservation is not filled")
        lines.append(f"  {res.used_cpus} CPU cores in use")
        lines.append(f"  {res.idle_cpus} CPU cores idle across {res.partial_nodes} nodes")
    return lines


def _job_line(geom: Geometry, res: Reservation) -> str:
    return f"  {geom.tasks} x {geom.threads} ({res.nodes} nodes; {res.cpus} CPU cores)"


def render_text(res: Reservation, alternates: list[tuple[Geometry, Reservation]]) -> str:
    """Human-readable report; the alternates block is omitted when there are none."""
    lines = _reservation_lines(res)
    if alternates:
        lines.append("alternate geometries that fill the reservation:")
        lines.extend(_job_line(g, r) for g, r in alternates)
    return "\n".join(lines) + "\n"


def build_report(
    geom: Geometry,
    res: Reservation,
    alternates: list[tuple[Geometry, Reservation]],
) -> ReservationReport:
    return ReservationReport(
        geometry=geom,
        reservation=res,
        alternatives=[JobPlan(geometry=g, reservation=r) for g, r in alternates],
    )


def render_json(geom: Geometry, res: Reservation, alternates: list[tuple[Geometry, Reservation]]) -> str:
    """Pretty-printed JSON with keys geometry, reservation, alternatives."""
    return build_report(geom, res, alternates).model_dump_json(indent=2) + "\n"
