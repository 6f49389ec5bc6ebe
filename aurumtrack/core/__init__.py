"""AurumTrack core package."""
