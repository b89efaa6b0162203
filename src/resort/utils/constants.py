MAX_PACKAGE_IMAGES = 10
DEFAULT_COOKING_DURATION = 30

BOOKING_NUMBER_PREFIX = "BK"
MAX_BOOKING_NUMBER_ATTEMPTS = 5

# percent off the booking total, keyed by package type value
BOOKING_DISCOUNT_PERCENT = {
    "luxury": 10,
    "budget": 5,
    "custom": 0,
}
