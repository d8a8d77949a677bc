"""Identifiers of the supported game modes."""

BLACKJACK = "blackjack"
# Add future game modes here
# POKER = "poker"

SUPPORTED_MODES = (BLACKJACK,)
