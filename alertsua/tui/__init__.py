"""Terminal dashboard: actions, bus, components and the dispatch loop."""
