"""HTTP surface for the frame stopwatch."""
