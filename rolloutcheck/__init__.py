"""rolloutcheck: rollout status engine for Kubernetes workloads."""

__version__ = "0.1.0"
