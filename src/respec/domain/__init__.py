"""Domain layer: specification graph, conflict resolution and artifact state."""
