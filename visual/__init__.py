"""Host-facing helpers around the dumbbell engine.

Settings decoding and validation, interaction behavior, the landing page
state and renderer payloads live here so `dumbbell` stays host-agnostic.
"""
