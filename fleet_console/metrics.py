from prometheus_client import Counter, Histogram

# Upstream (fleet backend) calls
UPSTREAM_LATENCY = Histogram("fleet_console_upstream_latency_seconds", "Latency of fleet backend requests", ["method"])
UPSTREAM_ERRORS = Counter("fleet_console_upstream_errors_total", "Failed fleet backend requests", ["status"])
TOKEN_REFRESHES = Counter("fleet_console_token_refresh_total", "Access token refresh attempts", ["result"])

# Listing
LIST_FETCHES = Counter("fleet_console_list_fetch_total", "List page fetches", ["entity", "result"])
STALE_RESPONSES = Counter("fleet_console_stale_responses_total", "List responses dropped because a newer request superseded them", ["entity"])
