"""Transport and dispatch collaborators of the metrics pipeline."""
