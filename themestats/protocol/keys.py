"""Key identifiers derived from public keys, and their display names."""
import hashlib
import re
from typing import Any, Mapping

from themestats.protocol.canonical import canonical_bytes

KEY_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")
KEY_ID_FIELDS = ("crv", "kty", "x", "y")

ADJECTIVES = (
    "Melodic", "Harmonic", "Acoustic", "Electric", "Mellow", "Groovy", "Funky", "Vibrant",
    "Golden", "Crystal", "Velvet", "Cosmic", "Stellar", "Radiant", "Mystic", "Serene",
    "Dynamic", "Smooth", "Crisp", "Warm", "Bright", "Deep", "Swift", "Bold",
    "Noble", "Grand", "Royal", "Epic", "Vivid", "Lucid", "Prime", "Pure",
    "Sonic", "Hyper", "Ultra", "Mega", "Super", "Astral", "Lunar", "Solar",
    "Neon", "Retro", "Classic", "Modern", "Fusion", "Primal", "Zen", "Nova",
    "Alpha", "Omega", "Delta", "Sigma", "Quantum", "Atomic", "Cyber", "Digital",
    "Analog", "Stereo", "Studio", "Live", "Remix", "Master", "Platinum", "Diamond",
)
NOUNS = (
    "Bass", "Guitar", "Piano", "Drum", "Synth", "Chord", "Beat", "Riff",
    "Note", "Tempo", "Rhythm", "Melody", "Verse", "Chorus", "Bridge", "Hook",
    "Track", "Vinyl", "Record", "Album", "Mix", "Tape", "Loop", "Sample",
    "Treble", "Octave", "Scale", "Arpeggio", "Cadence", "Motif", "Theme", "Score",
    "Cymbal", "Snare", "Kick", "Hihat", "Conga", "Bongo", "Shaker", "Gong",
    "Violin", "Cello", "Flute", "Horn", "Trumpet", "Sax", "Harp", "Bell",
    "Staccato", "Legato", "Crescendo", "Fermata", "Vibrato", "Tremolo", "Glissando", "Sforzando",
    "Forte", "Allegro", "Adagio", "Presto", "Andante", "Largo", "Vivace", "Maestro",
)
ACTIONS = (
    "Solo", "Remix", "Groove", "Flow", "Vibe", "Echo", "Pulse", "Drift",
    "Wave", "Loop", "Drop", "Rise", "Fade", "Blend", "Sync", "Glide",
    "Swing", "Bounce", "Slide", "Roll", "Spin", "Twist", "Shake", "Break",
    "Jam", "Play", "Rock", "Pop", "Jazz", "Funk", "Soul", "Blues",
    "Surge", "Rush", "Dash", "Zoom", "Flash", "Spark", "Blast", "Burst",
    "Chill", "Cruise", "Coast", "Sway", "Float", "Hover", "Soar", "Leap",
    "Strike", "Stomp", "Clap", "Snap", "Tap", "Slap", "Pluck", "Strum",
    "Hum", "Sing", "Chant", "Call", "Shout", "Whisper", "Croon", "Belt",
)


def is_valid_key_id(key_id: Any) -> bool:
    return isinstance(key_id, str) and KEY_ID_PATTERN.match(key_id) is not None


def normalize_key_id(key_id: str) -> str:
    return key_id.lower()


def hash_public_key(public_key: Mapping[str, Any]) -> str:
    """Derive the lowercase hex key id of a JWK.

    Only ``crv``, ``kty``, ``x`` and ``y`` take part, so extra JWK members
    (``ext``, ``key_ops``...) and member order never change the id.
    """
    material = {name: public_key.get(name) for name in KEY_ID_FIELDS}
    return hashlib.sha256(canonical_bytes(material)).hexdigest()


def verify_key_id(key_id: str, public_key: Mapping[str, Any]) -> bool:
    """Check that ``key_id`` (case-insensitive) is the hash of ``public_key``."""
    try:
        return hash_public_key(public_key) == normalize_key_id(key_id)
    except (TypeError, ValueError):
        return False


def generate_display_name(key_id: str) -> str:
    """Pick a stable adjective-noun-action name from the first three key id bytes."""
    hex_digits = re.sub(r"[^0-9a-f]", "", key_id.lower())
    adjective = ADJECTIVES[int(hex_digits[0:2], 16) % len(ADJECTIVES)]
    noun = NOUNS[int(hex_digits[2:4], 16) % len(NOUNS)]
    action = ACTIONS[int(hex_digits[4:6], 16) % len(ACTIONS)]
    return f"{adjective}{noun}{action}"
