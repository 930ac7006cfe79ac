"""
Forecasting: combines decomposed components into a month-by-month forecast.

Modules
-------
synthesizer : generate_forecast() + forecast_confidence() + classify_direction().
summary     : summarize_forecast() — start/end price, change, best/worst month.
"""
