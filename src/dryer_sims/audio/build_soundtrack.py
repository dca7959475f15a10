# src/dryer_sims/audio/build_soundtrack.py

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from dryer_sims.core.recording import SimulationRecording, EventSnapshot
from dryer_sims.core.surfaces import SurfaceKind
from dryer_sims.audio.engine import AudioEngine, SoundTrigger, make_percussion_samples
from dryer_sims.audio.mapping import (
    BASE_NOTE,
    NoteEvent,
    TriggerOutput,
    midi_velocity,
)

# semitones of note offset per octave of sample pitch shift
SEMITONES_PER_OCTAVE: float = 24.0


def notes_from_recording(recording: SimulationRecording, base_note: int = BASE_NOTE) -> List[NoteEvent]:
    """
    Replay recorded collisions through the catalog-order note assignment
    used live by SurfaceNoteMap.
    """
    surface_names: list[str] = recording.meta.get("surfaces", [])
    note_of = {name: base_note + i for i, name in enumerate(surface_names)}
    notes: List[NoteEvent] = []
    for ev in recording.iter_events():
        note = note_of.get(ev.surface)
        if note is None:
            continue
        notes.append(NoteEvent(
            t=ev.t,
            note=note,
            velocity=midi_velocity(ev.speed),
            output=TriggerOutput.for_kind(SurfaceKind(ev.kind)),
            surface=ev.surface,
        ))
    return notes


def note_to_trigger(note: NoteEvent, base_note: int = BASE_NOTE) -> SoundTrigger:
    return SoundTrigger(
        t=note.t,
        sample_name="vane" if note.output is TriggerOutput.VANE_OUT else "drum",
        gain=note.velocity / 127.0,
        pitch_ratio=2.0 ** ((note.note - base_note) / SEMITONES_PER_OCTAVE),
    )


def build_soundtrack_from_notes(
    notes: Iterable[NoteEvent],
    engine: AudioEngine,
    base_duration: Optional[float] = None,
    tail: float = 0.3,
    normalize: bool = True,
    base_note: int = BASE_NOTE,
):
    notes = list(notes)
    triggers = [note_to_trigger(n, base_note=base_note) for n in notes]
    if base_duration is None:
        base_duration = max((n.t for n in notes), default=0.0)
    return engine.mix(triggers=triggers, duration=base_duration, normalize=normalize, tail=tail)


def build_and_save_soundtrack(
    recording: SimulationRecording,
    wav_path: str | Path,
    sr: int = 44100,
    tail: float = 0.3,
    base_note: int = BASE_NOTE,
) -> Path:
    """Render the collisions of a recording as percussion and write a WAV."""
    wav_path = Path(wav_path)
    engine = AudioEngine(make_percussion_samples(sr), sr=sr)
    notes = notes_from_recording(recording, base_note=base_note)
    audio = build_soundtrack_from_notes(
        notes,
        engine,
        base_duration=recording.t_end or 0.0,
        tail=tail,
        base_note=base_note,
    )
    engine.write_wav(str(wav_path), audio)
    print(f"Wrote soundtrack with {len(notes)} hits to {wav_path}")
    return wav_path


def speed_stats(events: Iterable[EventSnapshot]) -> dict[str, float]:
    speeds = [ev.speed for ev in events]
    if not speeds:
        return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0}
    return {
        "count": len(speeds),
        "min": min(speeds),
        "max": max(speeds),
        "mean": sum(speeds) / len(speeds),
    }
