"""Summaries, rankings and price histories from warehouse purchase history."""
