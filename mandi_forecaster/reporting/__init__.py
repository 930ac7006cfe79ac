"""
Reporting: terminal tables and file exports for analysis outputs.

Modules
-------
formatters : format_forecast_table(), format_seasonal_table(),
             format_action_table(), format_market_table(), format_insight().
export     : models_to_rows(), forecast_rows(), export_to_csv(),
             export_to_json(), export_rows().
"""
