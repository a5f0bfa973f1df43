"""
Centralized subscription tier configuration constants.

This module defines all subscription tier labels, prices and feature copy in
one place so the account screens, the pricing grid and the entitlement
resolver can never disagree.
"""

# Pricing Configuration
CURRENCY = "GBP"
CURRENCY_SYMBOL = "£"
BILLING_INTERVAL = "month"

# Free Tier Configuration
FREE_LABEL = "Free"
FREE_PRICE_LABEL = "Free"
FREE_DESCRIPTION = "Limited testing"

# Basic Tier Configuration
BASIC_LABEL = "Basic"
BASIC_PRICE = 1
BASIC_PRICE_LABEL = f"{CURRENCY_SYMBOL}{BASIC_PRICE}/{BILLING_INTERVAL}"
BASIC_DESCRIPTION = "Full testing capabilities"

# Premium Tier Configuration
PREMIUM_LABEL = "Premium"
PREMIUM_PRICE = 2
PREMIUM_PRICE_LABEL = f"{CURRENCY_SYMBOL}{PREMIUM_PRICE}/{BILLING_INTERVAL}"
PREMIUM_DESCRIPTION = "Complete solution"

# Professional Tier Configuration
PROFESSIONAL_LABEL = "Professional"
PROFESSIONAL_PRICE = 5
PROFESSIONAL_PRICE_LABEL = f"{CURRENCY_SYMBOL}{PROFESSIONAL_PRICE}/{BILLING_INTERVAL}"
PROFESSIONAL_DESCRIPTION = "Custom branded reports"

# Feature descriptions for marketing, keyed by the lowest tier that unlocks them.
# Higher tiers inherit everything listed for the tiers below.
FREE_FEATURES = (
    'Up to 1" pipe testing',
    "Basic calculations",
    "Standard reports",
)
BASIC_FEATURES = (
    "All pipe sizes",
    "Unlimited testing",
    "Advanced calculations",
    "External reports",
    "PDF export",
)
PREMIUM_FEATURES = (
    "PDF certificates",
    "Purge calculations",
    "Priority support",
)
PROFESSIONAL_FEATURES = (
    "Custom company branding",
    "Your logo on reports",
    "Custom colors & styling",
    "White-label certificates",
)

# Upgrade navigation target (checkout lives outside this backend)
DEFAULT_UPGRADE_PATH = "/subscribe"
