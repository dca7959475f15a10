"""
Audio engine for mixing short percussion samples into a soundtrack.

Core ideas:
- AudioSample: PCM data, synthesized or loaded.
- SoundTrigger: "play sample S at time t with gain and pitch".
- AudioEngine: mixes triggers into a mono buffer and writes WAV.

All audio is float32 in [-1, 1] internally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
import numpy as np
from scipy.io import wavfile  # dependency: scipy


@dataclass
class AudioSample:
    """A short audio sample to be triggered by collisions."""
    name: str
    data: np.ndarray  # shape (n,), mono
    sr: int           # sample rate (Hz)


@dataclass
class SoundTrigger:
    """
    A request to play a sample at a specific time with gain and pitch.

    pitch_ratio: 1.0 = original speed/pitch, 2.0 = one octave up, etc.
    """
    t: float
    sample_name: str
    gain: float = 1.0
    pitch_ratio: float = 1.0


def decaying_tone(
    freq: float,
    sr: int,
    length: float = 0.25,
    decay: float = 18.0,
    noise: float = 0.0,
    seed: int = 0,
) -> np.ndarray:
    """Exponentially decaying sine with an optional noise burst on top."""
    t = np.arange(int(round(length * sr)), dtype=np.float32) / sr
    env = np.exp(-decay * t)
    data = np.sin(2.0 * np.pi * freq * t)
    if noise > 0.0:
        burst = np.random.default_rng(seed).uniform(-1.0, 1.0, size=t.shape)
        data = (1.0 - noise) * data + noise * burst * np.exp(-4.0 * decay * t)
    return (env * data).astype(np.float32)


def make_percussion_samples(sr: int = 44100) -> dict[str, AudioSample]:
    """Built-in sample bank: a low thud for the drum wall, a click for vanes."""
    return {
        "drum": AudioSample("drum", decaying_tone(70.0, sr, length=0.35, decay=12.0, noise=0.25), sr),
        "vane": AudioSample("vane", decaying_tone(660.0, sr, length=0.12, decay=40.0, noise=0.5, seed=1), sr),
    }


class AudioEngine:
    """
    Simple offline audio mixer.

    - Assumes all samples share the same sample rate.
    - Supports basic pitch shifting via time-stretch resampling.
    """

    def __init__(self, samples: dict[str, AudioSample], sr: int | None = None):
        if not samples:
            raise ValueError("AudioEngine requires at least one sample.")

        if sr is None:
            sr = next(iter(samples.values())).sr
        self.sr = sr

        self.samples: dict[str, AudioSample] = {}
        for name, s in samples.items():
            if s.sr != self.sr:
                raise ValueError(f"Sample {name!r} has sr={s.sr}, expected {self.sr}.")
            if s.data.ndim != 1:
                raise ValueError(f"Sample {name!r} must be mono.")
            self.samples[name] = s

    # ------------------ public API ------------------ #

    def mix(
        self,
        triggers: Iterable[SoundTrigger],
        duration: float,
        normalize: bool = True,
        tail: float = 0.0,
    ) -> np.ndarray:
        """
        Mix all triggers into an audio buffer.

        Parameters
        ----------
        triggers : iterable of SoundTrigger
        duration : float
            Base duration in seconds (e.g. length of recording).
        normalize : bool
            If True, scale down if peaks exceed 1.0.
        tail : float
            Extra seconds added after max(duration, last_trigger_time).

        Returns
        -------
        audio : np.ndarray
            Shape (n_samples,).
        """
        triggers = list(triggers)
        if not triggers:
            n_samples = int(np.ceil((duration + tail) * self.sr))
            return np.zeros(n_samples, dtype=np.float32)

        last_trigger_t = max(trig.t for trig in triggers)
        total_duration = max(duration, last_trigger_t) + tail
        n_samples = int(np.ceil(total_duration * self.sr))
        audio = np.zeros(n_samples, dtype=np.float32)

        for trig in triggers:
            sample = self.samples.get(trig.sample_name)
            if sample is None:
                raise KeyError(f"No sample named {trig.sample_name!r}")

            data = sample.data.astype(np.float32, copy=True)
            data = self._apply_pitch_and_gain(data, trig.pitch_ratio, trig.gain)

            start_idx = int(round(trig.t * self.sr))
            if start_idx >= n_samples:
                continue

            end_idx = min(start_idx + data.shape[0], n_samples)
            audio[start_idx:end_idx] += data[: end_idx - start_idx]

        if normalize:
            max_abs = float(np.max(np.abs(audio)))
            if max_abs > 1.0:
                audio /= max_abs

        return audio

    def write_wav(self, path: str, audio: np.ndarray) -> None:
        """Write a float32 audio buffer to WAV (PCM 16-bit)."""
        clipped = np.clip(audio, -1.0, 1.0)
        int16 = (clipped * 32767.0).astype(np.int16)
        wavfile.write(path, self.sr, int16)

    # ------------------ internal helpers ------------------ #

    def _apply_pitch_and_gain(self, data: np.ndarray, pitch_ratio: float, gain: float) -> np.ndarray:
        if not np.isclose(pitch_ratio, 1.0):
            data = self._resample_pitch(data, pitch_ratio)
        data *= gain
        return data

    @staticmethod
    def _resample_pitch(data: np.ndarray, pitch_ratio: float) -> np.ndarray:
        """
        Pitch-shift via time-domain resampling.

        pitch_ratio > 1.0 : sample plays faster and at higher pitch.
        pitch_ratio < 1.0 : slower / lower pitch.
        """
        n = data.shape[0]
        new_n = max(1, int(round(n / pitch_ratio)))
        x_old = np.linspace(0.0, 1.0, n, endpoint=False)
        x_new = np.linspace(0.0, 1.0, new_n, endpoint=False)
        return np.interp(x_new, x_old, data).astype(np.float32)
