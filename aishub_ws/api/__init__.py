"""HTTP API for the AisHub bridge."""
