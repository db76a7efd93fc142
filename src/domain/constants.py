"""Domain constants for the budgeting ledger."""

SENTIMENT_WORTHY = "worthy"
SENTIMENT_REGRET = "regret"
SENTIMENT_NEUTRAL = "neutral"

SENTIMENTS = (SENTIMENT_WORTHY, SENTIMENT_REGRET, SENTIMENT_NEUTRAL)

# Older documents tagged unclassified spending as "ignore".
LEGACY_SENTIMENT_ALIASES = {"ignore": SENTIMENT_NEUTRAL}

LOAN_BORROW = "borrow"
LOAN_LEND = "lend"

LOAN_TYPES = (LOAN_BORROW, LOAN_LEND)

MESSAGE_TEXT = "text"
MESSAGE_SPLIT = "split"
MESSAGE_SYSTEM = "system"

MESSAGE_TYPES = (MESSAGE_TEXT, MESSAGE_SPLIT, MESSAGE_SYSTEM)

TIME_FILTER_DAY = "day"
TIME_FILTER_WEEK = "week"
TIME_FILTER_MONTH = "month"
TIME_FILTER_ALL = "all"

# Sliding window length in days per filter; "all" has no window.
TIME_FILTER_WINDOWS_DAYS = {
    TIME_FILTER_DAY: 1,
    TIME_FILTER_WEEK: 7,
    TIME_FILTER_MONTH: 30,
    TIME_FILTER_ALL: None,
}

DEFAULT_PROFILE_NAME = "User"
DEFAULT_AVATAR_URL = (
    "https://api.dicebear.com/7.x/avataaars/svg?seed=default"
)
DEFAULT_CATEGORY = "General"
DEFAULT_AUTHOR = "You"

DEFAULT_HEATMAP_MEDIUM = 500
DEFAULT_HEATMAP_HIGH = 2000
# Relative heatmap: spending above this share of the daily budget is heavy.
RELATIVE_HEATMAP_HEAVY_PERCENT = 120

GOAL_POLICY_CACHED = "cached"
GOAL_POLICY_ROLLING = "rolling"

GOAL_POLICIES = (GOAL_POLICY_CACHED, GOAL_POLICY_ROLLING)


__all__ = [
    "SENTIMENT_WORTHY",
    "SENTIMENT_REGRET",
    "SENTIMENT_NEUTRAL",
    "SENTIMENTS",
    "LEGACY_SENTIMENT_ALIASES",
    "LOAN_BORROW",
    "LOAN_LEND",
    "LOAN_TYPES",
    "MESSAGE_TEXT",
    "MESSAGE_SPLIT",
    "MESSAGE_SYSTEM",
    "MESSAGE_TYPES",
    "TIME_FILTER_DAY",
    "TIME_FILTER_WEEK",
    "TIME_FILTER_MONTH",
    "TIME_FILTER_ALL",
    "TIME_FILTER_WINDOWS_DAYS",
    "DEFAULT_PROFILE_NAME",
    "DEFAULT_AVATAR_URL",
    "DEFAULT_CATEGORY",
    "DEFAULT_AUTHOR",
    "DEFAULT_HEATMAP_MEDIUM",
    "DEFAULT_HEATMAP_HIGH",
    "RELATIVE_HEATMAP_HEAVY_PERCENT",
    "GOAL_POLICY_CACHED",
    "GOAL_POLICY_ROLLING",
    "GOAL_POLICIES",
]
