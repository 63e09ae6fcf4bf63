"""Log-scale combinatorics, C numbers, cluster-count priors, and sampler state, partition update and trace for group-dependent finite mixture models."""

__version__ = "0.1.0"

__all__ = [
    "cnumbers",
    "combinatorics",
    "indexing",
    "kprior",
    "partition",
    "state",
    "trace",
]