"""Physics: vector math and the flight model."""
