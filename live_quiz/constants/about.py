"""Static metadata describing the live quiz server."""

APP_NAME = "Live Quiz"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = (
    "Live multi-participant quiz server: timed questions revealed in lockstep, "
    "time-decay scoring and a continuously updated leaderboard."
)
