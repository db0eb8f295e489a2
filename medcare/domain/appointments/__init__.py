"""
Appointments domain - Booking, rescheduling and the appointment lifecycle.

- availability.py: working-hours and overlap rules for a doctor
- lifecycle.py:    NEW / CONFIRMED / COMPLETED / CANCELLED transitions
- locking.py:      per-doctor exclusive sections around check-then-write
- service.py:      the only place appointments are created or changed
"""
