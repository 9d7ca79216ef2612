"""Bookings app package.

This app holds the booking model and the services around it: room
availability checks, turning a cart into bookings, cancellation and the
lazy completion of stays that have ended. Double bookings are prevented by
locking the room rows inside the checkout transaction and re-checking
availability under the lock.
"""
