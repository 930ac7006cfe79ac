"""
Market insights — contract with the external summarizer and its fallback.

Modules
-------
summarizer : Summarizer ABC, FallbackSummarizer, summarize_with_fallback(),
             seasonal_highlights().
"""
