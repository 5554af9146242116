"""Break-scheduling engine: timer, exercise selection, session recording."""
