"""Forecast: regional coefficient and gender-ratio tables, regional distributor."""
