"""
Seasonality analysis over a variety's price history.

Modules
-------
patterns : analyze_seasonal_patterns() + classify_price_index() — per-month
           price level, index, bucket and dispersion.
actions  : classify_seasonality_actions() + seasonality_action_table() —
           month-over-month Sell / Store / Monitor advice.
"""
