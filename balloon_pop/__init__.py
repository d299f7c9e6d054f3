"""
Balloon Pop Package
===================

Timed balloon-popping round engine and its tooling:

- round_core: spawning, motion, tap scoring, countdown and outcome
- evaluation: headless tap policies played over a fixed seed bank

Tunable parameters live in game_config.yaml; outcome tiers are fixed in code.
"""
