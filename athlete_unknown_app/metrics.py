import time

from prometheus_client import Counter, Histogram

# Define metrics
round_starts_counter = Counter(
    "athlete_unknown_round_starts_total", "Number of started or resumed rounds", ["sport", "origin"]
)  # origin: 'fresh', 'restored', 'history'

round_completions_counter = Counter(
    "athlete_unknown_round_completions_total", "Number of finished rounds", ["sport", "reason"]
)  # 'won', 'revealed', 'gaveUp'

round_score_histogram = Histogram(
    "athlete_unknown_round_score",
    "Distribution of final scores",
    ["sport", "reason"],
    buckets=(0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 95, 100),
)

guesses_counter = Counter("athlete_unknown_guesses_total", "Number of submitted guesses", ["sport", "outcome"])

tile_flips_counter = Counter("athlete_unknown_tile_flips_total", "Number of tile clicks", ["sport", "tile", "result"])

result_submissions_counter = Counter(
    "athlete_unknown_result_submissions_total", "Number of result submissions to the backend", ["sport", "status"]
)  # 'success', 'error'

persistence_failures_counter = Counter(
    "athlete_unknown_persistence_failures_total", "Number of failed session store operations", ["operation"]
)

round_fetch_failures_counter = Counter(
    "athlete_unknown_round_fetch_failures_total", "Number of failed round fetches", ["sport"]
)

# API request latency
api_request_latency = Histogram(
    "athlete_unknown_api_request_latency_seconds", "API request latency in seconds", ["endpoint"]
)

# API request counter
api_request_counter = Counter("athlete_unknown_api_requests_total", "Number of API requests", ["endpoint", "status"])


# Helper function to track API request latency
def track_request_latency(endpoint):
    start_time = time.time()

    def stop_timer(status="success"):
        latency = time.time() - start_time
        api_request_latency.labels(endpoint=endpoint).observe(latency)
        api_request_counter.labels(endpoint=endpoint, status=status).inc()

    return stop_timer


def record_round_start(sport, origin):
    round_starts_counter.labels(sport=sport, origin=origin).inc()


# Increment counter when a round is finished
def record_round_completion(sport, reason, score):
    round_completions_counter.labels(sport=sport, reason=reason).inc()
    round_score_histogram.labels(sport=sport, reason=reason).observe(score)


def record_guess(sport, outcome):
    guesses_counter.labels(sport=sport, outcome=outcome).inc()


def record_tile_click(sport, tile, result):
    tile_flips_counter.labels(sport=sport, tile=tile, result=result).inc()


def record_result_submission(sport, status):
    """
    Record a result submission attempt.

    Args:
        sport (str): Sport of the submitted round.
        status (str): 'success' or 'error'.
    """
    result_submissions_counter.labels(sport=sport, status=status).inc()


def record_persistence_failure(operation):
    persistence_failures_counter.labels(operation=operation).inc()


def record_round_fetch_failure(sport):
    round_fetch_failures_counter.labels(sport=sport).inc()
