DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5

EASE_DELTA = {
    1: -0.20,  # Again
    2: -0.15,  # Hard
    3: 0.15,   # Good
    4: 0.15,   # Easy
}
FIRST_INTERVAL_DAYS = {
    3: 1,      # Good: 1 day
    4: 4,      # Easy: 4 days
}
HARD_MULTIPLIER = 1.2
EASY_BONUS = 1.3
MIN_INTERVAL_DAYS = 1

DAILY_NEW_CARD_QUOTA = 10
