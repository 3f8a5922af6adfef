"""
CensusMap - Choropleth rendering helpers.

Thin wrappers around matplotlib/mapclassify (static) and plotly (interactive).
Install with `pip install censusmap[viz]`.
"""
