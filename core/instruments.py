"""Instrument id -> display label, in the order the server numbers them."""

from typing import Any, Optional

UNKNOWN_INSTRUMENT = "Unknown"

INSTRUMENT_NAMES: tuple[str, ...] = (
    "None",
    "Drum Set",
    "Djembe",
    "Electric Guitar",
    "Acoustic Guitar",
    "Bass Guitar",
    "Keyboard",
    "Synthesizer",
    "Grand Piano",
    "Accordion",
    "Vocal",
    "Microphone",
    "Harmonica",
    "Trumpet",
    "Trombone",
    "French Horn",
    "Tuba",
    "Saxophone",
    "Clarinet",
    "Flute",
    "Violin",
    "Cello",
    "Double Bass",
    "Recorder",
    "Streamer",
    "Listener",
    "Guitar+Vocal",
    "Keyboard+Vocal",
    "Bodhran",
    "Bassoon",
    "Oboe",
    "Harp",
    "Viola",
    "Congas",
    "Bongo",
    "Vocal Bass",
    "Vocal Tenor",
    "Vocal Alto",
    "Vocal Soprano",
    "Banjo",
    "Mandolin",
    "Ukulele",
    "Bass Ukulele",
    "Vocal Baritone",
    "Vocal Lead",
    "Mountain Dulcimer",
    "Scratching",
    "Rapping",
    "Vibraphone",
    "Conductor",
)


def lookup_instrument(instrument_id: Any) -> Optional[str]:
    """Return the label for an id, or None when there is no entry."""
    if isinstance(instrument_id, bool) or not isinstance(instrument_id, int):
        return None
    if 0 <= instrument_id < len(INSTRUMENT_NAMES):
        return INSTRUMENT_NAMES[instrument_id]
    return None


def instrument_label(instrument_id: Any) -> str:
    return lookup_instrument(instrument_id) or UNKNOWN_INSTRUMENT
