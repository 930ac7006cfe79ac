"""
Market recommendation engine: ranks markets by expected net benefit to a seller.

Modules
-------
scorer : ScoreComponents dataclass + classify_distance_band() + transport_cost()
         + compute_market_score() — pure functions, no I/O.
ranker : MarketAggregate dataclass + aggregate_markets() + score_markets()
         + rank_markets().
trip   : VehicleInfo / TripEstimate + estimate_trip() — fuel cost for a route.
"""
