"""
Service-wide constants
"""

SERVICE_NAME = "staffdesk-backend"

# system_settings keys
SETTING_ABSENCE_DEDUCTION_PERCENTAGE = "absence_deduction_percentage"
SETTING_WORKING_DAYS_PER_MONTH = "working_days_per_month"
SETTING_COMPANY_NAME = "company_name"
SETTING_LOGIN_PAGE_TITLE = "login_page_title"
SETTING_LOGIN_PAGE_SUBTITLE = "login_page_subtitle"
SETTING_MONTHLY_RESET_LAST_RUN = "monthly_reset_last_run"

# Seeded on first startup: key -> (value, description)
DEFAULT_SYSTEM_SETTINGS = {
    SETTING_ABSENCE_DEDUCTION_PERCENTAGE: ("100", "Percentage of the daily rate deducted per absence"),
    SETTING_WORKING_DAYS_PER_MONTH: ("22", "Working days used to derive the daily rate"),
    SETTING_COMPANY_NAME: ("Staffdesk", "Company display name"),
}

# Strike that ends employment instead of suspending
TERMINATION_STRIKE = 3

# Longest suspension that can be raised (ten years)
MAX_SUSPENSION_DAYS = 3650
