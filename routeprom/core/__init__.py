"""Framework-independent core: policy, labels, sizes, recording."""
