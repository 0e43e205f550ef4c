"""Boutique du sweat à capuche: commandes différées et paiements Stripe."""
