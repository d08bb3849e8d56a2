"""HTTP surface for the FireRate engine."""
