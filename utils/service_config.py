"""Service-level configuration defaults shared across modules."""

# Reserved deck that lists every card without a deck assignment
UNCATEGORIZED_DECK_NAME = "Uncategorized"

# Save-state retention
DEFAULT_MAX_SAVE_STATES = 10
MIN_SAVE_STATES = 1
MAX_SAVE_STATES = 50
DEFAULT_SAVE_STATE_MAX_AGE_DAYS = 30
SAVE_STATE_MIN_AGE_DAYS = 1
SAVE_STATE_MAX_AGE_DAYS = 365

DEFAULT_MERGE_STRATEGY = "merge_additional_fields"

VALID_ARTICLES = ("de", "het")

CSV_HEADER = [
    "Word",
    "Definition",
    "Example",
    "Article",
    "Past Tense",
    "Future Tense",
    "Decks",
    "Success Count",
    "Times Shown",
    "Times Correct",
]
CSV_DECK_SEPARATOR = ";"
