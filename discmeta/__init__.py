"""Audio CD metadata: CDDB mirror lists, submission data and MusicBrainz lookups."""

__version__ = "0.1.0"
__all__ = ["sites", "submit", "musicbrainz", "asynclookup"]