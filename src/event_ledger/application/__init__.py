"""Application – event sourcing building blocks (framework-agnostic)."""
