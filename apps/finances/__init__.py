"""Finances app: payments, the Stripe gateway and webhook reconciliation."""
