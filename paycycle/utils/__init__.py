"""Calendar and money helpers shared by the models and the engine."""
