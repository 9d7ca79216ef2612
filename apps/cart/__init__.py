"""Shopping cart: prospective bookings kept per caller until checkout."""
