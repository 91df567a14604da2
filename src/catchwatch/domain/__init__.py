"""Domain layer: reference data, landing reconciliation and their ports."""
