"""Constraint-graph manipulation planning."""
