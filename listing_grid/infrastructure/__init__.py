"""Infrastructure services shared by all pipeline components."""
