"""Supply-chain stage catalogue and progression helpers."""

from __future__ import annotations

from enum import IntEnum


class Stage(IntEnum):
    MANUFACTURED = 0
    IN_TRANSIT = 1
    DELIVERED = 2
    SOLD = 3

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]


_STAGE_LABELS: dict[Stage, str] = {
    Stage.MANUFACTURED: "Manufactured",
    Stage.IN_TRANSIT: "InTransit",
    Stage.DELIVERED: "Delivered",
    Stage.SOLD: "Sold",
}
_LABEL_LOOKUP: dict[str, Stage] = {
    **{label.lower(): stage for stage, label in _STAGE_LABELS.items()},
    **{stage.name.lower(): stage for stage in Stage},
}


def parse_stage(value: int | str | Stage) -> Stage:
    """Accept the numeric stage, its label (``InTransit``) or enum name (``IN_TRANSIT``)."""
    if isinstance(value, Stage):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Unknown stage: {value!r}")
    if isinstance(value, int):
        try:
            return Stage(value)
        except ValueError:
            raise ValueError(f"Unknown stage: {value!r}") from None

    raw = (value or "").strip()
    if raw.isdigit():
        return parse_stage(int(raw))
    stage = _LABEL_LOOKUP.get(raw.lower())
    if stage is None:
        raise ValueError(f"Unknown stage: {value!r}")
    return stage


def is_forward_transition(*, current: Stage | None, nxt: Stage) -> bool:
    """A step may repeat the current stage (multi-hop transit) or move forward."""
    if current is None:
        return True
    return nxt >= current


def ensure_stage_order(*, current: Stage | None, nxt: Stage) -> None:
    if not is_forward_transition(current=current, nxt=nxt):
        raise ValueError(f"Stage {nxt.label} cannot follow {current.label}")


def out_of_order_positions(stages: list[Stage]) -> list[int]:
    """Positions whose stage moves backwards relative to the one before."""
    return [
        index
        for index in range(1, len(stages))
        if not is_forward_transition(current=stages[index - 1], nxt=stages[index])
    ]
