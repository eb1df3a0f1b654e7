"""司马光Wiki: a browsable catalogue of titles served with FastAPI."""
