"""Prediction core for generalized random forests: data tables, observations,
prediction strategies and collectors, forest prediction and split analysis."""

__version__ = "0.1.0"