"""Infrastructure implementations of the domain protocols."""
