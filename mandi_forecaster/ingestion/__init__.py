"""
Ingestion boundary — turns raw API / CSV rows into clean ``MarketRecord`` objects.

Submodules:
  records — field alias table, price/date parsing, CSV and JSON loaders,
            and the ``MarketRecord`` → ``PricePoint`` projection.

Fetching raw data over the network is the caller's job; loaders here read
files that have already been downloaded.
"""
