"""Core systems: logging, resources, input, frame clock and the simulation driver."""
