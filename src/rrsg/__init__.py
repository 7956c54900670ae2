"""Round-robin schedule generator: assigns every team pairing a shared time slot."""
