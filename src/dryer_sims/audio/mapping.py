# src/dryer_sims/audio/mapping.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Sequence

from dryer_sims.core.surfaces import Surface, SurfaceId, SurfaceKind

BASE_NOTE: int = 36          # C2
MIDI_VELOCITY_SCALE: float = 300.0


class TriggerOutput(Enum):
    """Gate output a surface kind fires: wall hits on one, vane hits on the other."""
    DRUM_OUT = 1
    VANE_OUT = 2

    @classmethod
    def for_kind(cls, kind: SurfaceKind) -> "TriggerOutput":
        return cls.VANE_OUT if kind.is_vane else cls.DRUM_OUT


def midi_velocity(speed: float, scale: float = MIDI_VELOCITY_SCALE) -> int:
    """Impact speed (m/s) -> MIDI velocity in [0, 127]."""
    return max(0, min(127, int(speed * scale)))


class SurfaceNoteMap:
    """
    Assigns consecutive note numbers to the surfaces of a catalog, in
    catalog order. Surface ids are only meaningful for the catalog they came
    from, so call `rebuild` after every vane count change.
    """

    def __init__(self, base_note: int = BASE_NOTE, surfaces: Sequence[Surface] | None = None):
        self.base_note = base_note
        self._notes: dict[SurfaceId, int] = {}
        if surfaces is not None:
            self.rebuild(surfaces)

    def rebuild(self, surfaces: Sequence[Surface]) -> None:
        self._notes = {s.id: self.base_note + i for i, s in enumerate(surfaces)}

    def note_for(self, surface: Surface) -> int:
        return self._notes[surface.id]

    def get(self, surface: Surface) -> int | None:
        return self._notes.get(surface.id)

    def __len__(self) -> int:
        return len(self._notes)


@dataclass
class NoteEvent:
    """A note-on request for one dispatched hit."""
    t: float
    note: int
    velocity: int
    output: TriggerOutput
    surface: str


NoteSink = Callable[[NoteEvent], None]


@dataclass
class NoteTriggerListener:
    """
    Collision listener turning hits into NoteEvents.

    Runs inside the physics step, so `sink` must not block; hand slow work
    (timed note-offs, serial writes) to another thread.
    """
    note_map: SurfaceNoteMap
    clock: Callable[[], float] = lambda: 0.0
    sink: NoteSink | None = None
    notes: List[NoteEvent] = field(default_factory=list)

    def __call__(self, surface: Surface, speed: float) -> None:
        note = self.note_map.get(surface)
        if note is None:
            return
        ev = NoteEvent(
            t=float(self.clock()),
            note=note,
            velocity=midi_velocity(speed),
            output=TriggerOutput.for_kind(surface.kind),
            surface=surface.name,
        )
        self.notes.append(ev)
        if self.sink is not None:
            self.sink(ev)


def notes_by_output(notes: Iterable[NoteEvent]) -> dict[TriggerOutput, List[NoteEvent]]:
    out: dict[TriggerOutput, List[NoteEvent]] = {o: [] for o in TriggerOutput}
    for n in notes:
        out[n.output].append(n)
    return out
