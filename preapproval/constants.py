"""Step indices, storage keys and exit codes for the pre-approval wizard."""

# Exit codes for `python -m preapproval`
WIZARD_COMPLETED = 0  # Reached the results step
WIZARD_QUIT = 1  # User cancelled (Ctrl+C)

# Step indices with special behavior
LOCATION_STEP = 1
OWN_HOME_STEP = 5
SELL_HOME_STEP = 6  # Skipped unless OWN_HOME_STEP holds OWNS_HOME_ANSWER
PRICE_STEP = 9
DOWN_PAYMENT_STEP = 10
NAME_STEP = 15
EMAIL_STEP = 16
CODE_STEP = 17
RESULTS_STEP = 18

OWNS_HOME_ANSWER = "Yes, I currently own a home"

# Upper bound of the price band shown for a price-range lower bound
PRICE_BAND = 50000

DEFAULT_SLIDER_VALUE = 300000
DEFAULT_DOWN_PAYMENT = 20

# Persistence keys
STEP_KEY = "mortgageFlowStep"
ANSWERS_KEY = "mortgageFlowOptions"
SLIDER_KEY = "mortgageFlowPrice"
RESULT_KEY = "preApprovalResult"
