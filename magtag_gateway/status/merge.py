from __future__ import annotations

from magtag_gateway.status.engine import DisplayPayload


def select_earliest(
    *payloads: DisplayPayload | None,
    default: DisplayPayload,
) -> DisplayPayload:
    """Return the payload whose event starts first.

    Missing payloads and payloads without an event are skipped; ``default`` is
    returned when nothing is left. Ties keep the earlier argument.
    """

    best: DisplayPayload | None = None
    for payload in payloads:
        if payload is None or payload.event_instant is None:
            continue
        if best is None or payload.event_instant < best.event_instant:
            best = payload
    return best if best is not None else default
