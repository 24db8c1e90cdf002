"""Enumerations for the Lightbulbs data model."""

from enum import Enum


class ModelStatus(str, Enum):
    """Sync state of an in-memory entity model."""

    EMPTY = "EMPTY"  # No data loaded or set
    PRISTINE = "PRISTINE"  # Equal to the record as of the last sync
    DIRTY = "DIRTY"  # Local edits not yet saved


class ReferenceSourceType(str, Enum):
    """The medium a reference source comes from."""

    PRINT = "Print"  # Printed media, e.g. books
    WEBPAGE = "Web Page"  # Online pages or articles
    IMAGE = "Image"  # Images, drawings, paintings
    VIDEO = "Video"  # Clips, movies, animations
    AUDIO = "Audio"  # Recorded sounds, not including music
    MUSIC = "Music"  # Songs and compositions
    SOFTWARE = "Software"  # Programs or applications
    BULB = "Bulb"  # Another bulb in the same database


class ReferenceType(str, Enum):
    """The medium a reference comes from."""

    PRINT = "Print"
    WEBPAGE = "Web Page"
    IMAGE = "Image"
    VIDEO = "Video"
    AUDIO = "Audio"
    MUSIC = "Music"
    SOFTWARE = "Software"
    BULB = "Bulb"
