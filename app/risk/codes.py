# app/risk/codes.py

MAX_RISK_PCT = "MAX_RISK_PCT"
POSITION_EXCEEDS_ACCOUNT = "POSITION_EXCEEDS_ACCOUNT"
RISK_BUDGET_TOO_SMALL = "RISK_BUDGET_TOO_SMALL"
TARGETS_OVER_ALLOCATED = "TARGETS_OVER_ALLOCATED"
TARGET_WRONG_SIDE = "TARGET_WRONG_SIDE"

RISK_CODES = {
    MAX_RISK_PCT: {
        "category": "risk",
        "default_severity": "warning",
        "description": "Risk per trade exceeds allowed percent",
    },
    POSITION_EXCEEDS_ACCOUNT: {
        "category": "exposure",
        "default_severity": "warning",
        "description": "Position value is larger than the account",
    },
    RISK_BUDGET_TOO_SMALL: {
        "category": "sizing",
        "default_severity": "warning",
        "description": "Risk budget does not cover a single share",
    },
    TARGETS_OVER_ALLOCATED: {
        "category": "targets",
        "default_severity": "warning",
        "description": "Target exit percentages add up to more than 100%",
    },
    TARGET_WRONG_SIDE: {
        "category": "targets",
        "default_severity": "warning",
        "description": "Profit target sits on the losing side of entry",
    },
}
