"""Experiment drivers: single runs, replicated scenarios, CRN comparisons."""
