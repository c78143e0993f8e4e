"""
Application-wide constants.
Centralizes magic numbers and fixed field lists.
"""

# Dashboard
DEFAULT_PAGE_SIZE = 10

# Validation limits
MAX_NOTE_LENGTH = 2000

# Fields the API requires when creating a booking
CREATE_REQUIRED_FIELDS = (
    "full_name",
    "email",
    "phone_number",
    "rental_company",
    "card_last4",
    "expiration",
    "billing_address",
)

# Fields the cancellation endpoint requires for a customer with no booking on file
NEW_CANCELLATION_REQUIRED_FIELDS = (
    "full_name",
    "phone_number",
    "rental_company",
    "confirmation_number",
    "pickup_date",
    "dropoff_date",
    "pickup_location",
    "dropoff_location",
    "card_last4",
    "expiration",
    "billing_address",
    "date_of_birth",
    "sales_agent",
)

# Placeholder the company picker uses for "add a new company"
OTHER_RENTAL_COMPANY = "Other"

# Timeline messages
NEW_BOOKING_MESSAGE = "New booking created"
UNKNOWN_AGENT = "Unknown Agent"
