"""Game engine: world model, parser, dispatcher and combat."""
