"""
Time-series decomposition of a price history into additive components.

Modules
-------
trend    : extract_trend() + extrapolate_trend() — OLS over sample index.
seasonal : extract_seasonality() + extract_weekly_pattern() — mean deviation
           profiles by calendar month and by day of week.
"""
